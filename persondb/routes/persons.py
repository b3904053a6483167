"""Person list and generate endpoints"""

import logging
import os
from contextlib import closing
from pathlib import Path
from typing import Optional

import anyio
from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from persondb.core.config import Settings
from persondb.core.exceptions import DatabaseException, PersonDBException
from persondb.db.backend_base import DatabaseBackend
from persondb.db.database import get_database as get_db
from persondb.db.sql_queries import insert_person_sql, latest_persons_sql
from persondb.models.person import Person
from persondb.utils.fake_person import fake_person

logger = logging.getLogger(__name__)

router = APIRouter(tags=["persons"])

templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))


def get_settings(request: Request) -> Settings:
    """FastAPI dependency for the settings the app was created with"""
    return request.app.state.settings


def current_region(settings: Settings) -> str:
    return os.environ.get(settings.region_env_var, "")


async def cancel_on_disconnect(request: Request, scope: anyio.CancelScope) -> None:
    """Cancel ``scope`` as soon as the client goes away."""
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            logger.info("Client disconnected, cancelling request")
            scope.cancel()
            return


@router.get("/")
def list_latest(
    request: Request,
    region: Optional[str] = Query(None, description="Replay the request in this region"),
    accept: Optional[str] = Header(None),
    db: DatabaseBackend = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Show the ten most recently added persons"""
    this_region = current_region(settings)

    # If a different region is specified, replay the request there.
    if region and region != this_region:
        logger.info(f"redirecting from {this_region!r} to {region!r}")
        return Response(status_code=307, headers={"fly-replay": f"region={region}"})

    try:
        with closing(db.query(latest_persons_sql)) as cursor:
            persons = [Person.from_row(row) for row in cursor.fetchall()]
    except PersonDBException:
        raise
    except Exception as e:
        logger.error(f"Error getting persons: {str(e)}")
        raise DatabaseException("Failed to retrieve persons", detail=str(e))

    if accept == "text/plain":
        lines = [f"REGION: {this_region}", ""]
        lines.extend(person.as_text_line() for person in persons)
        return PlainTextResponse("\n".join(lines) + "\n")

    return templates.TemplateResponse(
        request, "index.html", {"region": this_region, "persons": persons}
    )


@router.post("/generate")
async def generate_person(request: Request, db: DatabaseBackend = Depends(get_db)):
    """Insert one synthetic person, then send the client back where it came from"""
    person = fake_person()
    error: Optional[Exception] = None
    inserted = False

    async with anyio.create_task_group() as tg:
        tg.start_soon(cancel_on_disconnect, request, tg.cancel_scope)
        try:
            await db.execute_async(insert_person_sql, person.name, person.phone, person.company)
            inserted = True
        except Exception as e:
            error = e
        tg.cancel_scope.cancel()

    if error is not None:
        logger.error(f"Error inserting person: {str(error)}")
        if isinstance(error, PersonDBException):
            raise error
        raise DatabaseException("Failed to insert person", detail=str(error))
    if not inserted:
        raise DatabaseException("Insert cancelled: client disconnected")

    logger.debug(f"Inserted person {person.name!r}")
    return RedirectResponse(request.headers.get("referer") or "/", status_code=302)
