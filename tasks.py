""" Invoke tasks. """
import os
import sys
import io
from pathlib import Path
from invoke.tasks import task
from scheduler.builder import build_schedule
from utils.loader import export_schedule_excel, load_schedule_request
from utils.logger import configure_logging

if isinstance(sys.stdout, io.TextIOWrapper):
    sys.stdout.reconfigure(encoding='utf-8')


@task
def install(c):
    c.run('pip install -e ".[test]"')


@task
def serve(c):
    c.run("uvicorn main:app --reload --host 127.0.0.1 --port 8001", env={"PYTHONUTF8": "1"})


@task
def test(c):
    c.run("pytest -q", env={"PYTHONUTF8": "1"})


@task(help={
    "request": "Path to a schedule request JSON file (default: data/schedule_request.json)",
    "output": "Path of the Excel workbook to write (default: output/schedule.xlsx)",
})
def roster(c, request=None, output=None):
    """
    Generate a roster from a request file and export it to Excel.
    """
    configure_logging()
    schedule_request = load_schedule_request(Path(request) if request else None)
    result = build_schedule(schedule_request)
    path = export_schedule_excel(result, Path(output) if output else None)
    print(f"📁 Roster written to {path} (score {result.quality.overallScore})")
    return path


@task
def clean(c):
    """
    Cross-platform clean task to remove all __pycache__ folders and .pyc files.
    """
    if os.name == 'nt':  # Windows
        # Remove all .pyc files
        c.run("for /R %f in (*.pyc) do del /F /Q \"%f\"", warn=True)
        # Remove all __pycache__ directories recursively
        c.run('for /d /r %d in (__pycache__) do @if exist "%d" rmdir /s /q "%d"', warn=True)
    else:  # Unix/Linux/macOS
        c.run("find . -type f -name '*.pyc' -delete", warn=True)
        c.run("find . -type d -name '__pycache__' -exec rm -r {} +", warn=True)
