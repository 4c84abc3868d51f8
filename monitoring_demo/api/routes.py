"""
HTTP routes: index page plus one trigger path per backend
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse

from monitoring_demo.api.dependencies import get_app_settings, get_runner
from monitoring_demo.api.pages import render_index
from monitoring_demo.core.config import Settings
from monitoring_demo.services.runner import ExerciseRunner

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(
    settings: Settings = Depends(get_app_settings),
    runner: ExerciseRunner = Depends(get_runner),
):
    """List the backend demo links, disabling the ones currently running"""
    page = render_index(
        settings.APP_NAME,
        runner.exercisers.values(),
        runner.guard.busy(),
    )
    return HTMLResponse(content=page, status_code=status.HTTP_200_OK)


@router.get("/{backend}")
async def exercise_backend(backend: str, runner: ExerciseRunner = Depends(get_runner)):
    """
    Run the exerciser for `backend` and redirect to the index

    Responses:
        302: run finished (sync mode) or was submitted (background mode)
        404: no such backend
        500: backend busy, or the run failed (body is the error text)
    """
    if backend not in runner.exercisers:
        raise HTTPException(status_code=404, detail="Not Found")

    await runner.run(backend)

    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
