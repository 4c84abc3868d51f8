"""
FastAPI Dependencies
"""
from fastapi import Request

from monitoring_demo.core.config import Settings
from monitoring_demo.services.runner import ExerciseRunner


def get_runner(request: Request) -> ExerciseRunner:
    """Get the exercise runner owned by the application"""
    return request.app.state.runner


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was built with"""
    return request.app.state.settings
