"""
Index page
"""
from html import escape
from typing import Iterable

from monitoring_demo.exercisers.base import Exerciser

BOOTSTRAP_CSS = "//maxcdn.bootstrapcdn.com/bootstrap/3.3.7/css/bootstrap.min.css"
BOOTSTRAP_JS = "//maxcdn.bootstrapcdn.com/bootstrap/3.3.7/js/bootstrap.min.js"
JQUERY_JS = "//code.jquery.com/jquery-3.1.1.min.js"


def render_button(exerciser: Exerciser, busy: bool) -> str:
    classes = f"btn {exerciser.style}" + (" disabled" if busy else "")
    return (
        f'<a class="{classes}" href="/{escape(exerciser.name)}">'
        f"{escape(exerciser.label)}</a>"
    )


def render_index(title: str, exercisers: Iterable[Exerciser], busy: Iterable[str]) -> str:
    """Build the index page; buttons of running backends are disabled"""
    busy = set(busy)
    buttons = "\n            ".join(
        render_button(exerciser, exerciser.name in busy)
        for exerciser in exercisers
    )

    return f"""<!DOCTYPE html>
<html>
    <head>
        <link rel="stylesheet" href="{BOOTSTRAP_CSS}" crossorigin="anonymous">
        <title>DEMO App</title>
    </head>
    <body>
        <nav class="navbar navbar-default">
            <div class="container-fluid">
                <div class="navbar-header">
                    <span class="navbar-brand">{escape(title)}</span>
                </div>
            </div>
        </nav>

        <div class="container">
            {buttons}
        </div>

        <script src="{JQUERY_JS}" crossorigin="anonymous"></script>
        <script src="{BOOTSTRAP_JS}" crossorigin="anonymous"></script>
    </body>
</html>
"""
