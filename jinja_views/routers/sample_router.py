"""Sample pages: person form with validation, file upload and plain views."""

from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from starlette.datastructures import FormData, UploadFile

from jinja_views.antiforgery import validate_antiforgery_token
from jinja_views.binding import bind_form
from jinja_views.core.middleware import UPLOAD_RATE_LIMIT, limiter
from jinja_views.logging_config import get_logger, log_with_context
from jinja_views.models.person import CreatePerson, Person
from jinja_views.models.upload import UploadedFileInfo, describe_files
from jinja_views.views.responses import html_view, view
from jinja_views.views.view_data import FORM_ERROR_KEY, ViewData

logger = get_logger(__name__)

router = APIRouter()

SAMPLE_VIEW_DATA = ViewData(Who="Foo Bar", Foo=89, Bar=True)
CREATE_PERSON_VIEW_DATA = ViewData(Title="Create person")
PERSON_VIEW_DATA = ViewData(Title="Mr Fox")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def has_form_content_type(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() in FORM_CONTENT_TYPES


def uploaded_files(form: FormData) -> list[UploadedFileInfo]:
    """Summaries of the file parts of a form, in posted order."""
    return [
        UploadedFileInfo(filename=value.filename or "", size=value.size or 0)
        for _, value in form.multi_items()
        if isinstance(value, UploadFile)
    ]


@router.get("/", response_class=PlainTextResponse)
async def index():
    return "index"


@router.get("/razor")
async def hello(request: Request) -> Response:
    """Render the Hello view from view data only."""
    return view(request, "text/html", "Hello", view_data=SAMPLE_VIEW_DATA)


@router.get("/person/create")
async def create_person_form(request: Request) -> Response:
    """Render the empty create-person form."""
    model = CreatePerson(name="", check_me=True)
    return html_view(request, "CreatePerson", model, CREATE_PERSON_VIEW_DATA)


@router.get("/person")
async def person(request: Request, name: str | None = None) -> Response:
    """Render a person, named by the ``name`` query parameter."""
    model = Person(name=name if name is not None else "Razor")
    return html_view(request, "Person", model, PERSON_VIEW_DATA)


@router.get("/upload")
async def upload_form(request: Request) -> Response:
    """Render the file upload page."""
    return html_view(request, "FileUpload", "File upload", SAMPLE_VIEW_DATA)


@router.post("/small-upload", response_class=PlainTextResponse)
@limiter.limit(UPLOAD_RATE_LIMIT)
async def small_upload(request: Request) -> Response:
    """List files posted as a regular form."""
    if not has_form_content_type(request):
        return PlainTextResponse("Bad request", status_code=400)

    settings = request.app.state.settings
    async with request.form(max_files=settings.max_upload_files) as form:
        files = uploaded_files(form)

    log_with_context(logger, "info", "Small upload received", file_count=len(files), event_type="upload_small")
    return PlainTextResponse(describe_files(files))


@router.post("/large-upload", response_class=PlainTextResponse)
@limiter.limit(UPLOAD_RATE_LIMIT)
async def large_upload(request: Request) -> Response:
    """List files from a form read with the larger upload limits.

    Multipart parts are streamed by Starlette and spooled to disk past 1MB.
    """
    if not has_form_content_type(request):
        return PlainTextResponse("Bad request", status_code=400)

    settings = request.app.state.settings
    async with request.form(max_files=settings.large_upload_max_files) as form:
        files = uploaded_files(form)

    log_with_context(
        logger,
        "info",
        "Large upload received",
        file_count=len(files),
        total_bytes=sum(info.size for info in files),
        event_type="upload_large",
    )
    return PlainTextResponse(describe_files(files))


@router.post("/person/create", dependencies=[Depends(validate_antiforgery_token)])
async def create_person(request: Request) -> Response:
    """Validate the create-person form; redirect on success, redisplay on errors."""
    model, model_state = await bind_form(request, CreatePerson)

    if model.check_me is not True:
        model_state.add_error("CheckMe", "Checkbox must be checked")
        model_state.add_error(FORM_ERROR_KEY, "Error without an associated field")
    if not str(model.name).strip():
        model_state.add_error("Name", "Name is required")

    if model_state.is_valid:
        return RedirectResponse(f"/person?{urlencode({'name': model.name})}", status_code=302)

    log_with_context(
        logger,
        "info",
        "Create person form rejected",
        error_count=model_state.error_count,
        event_type="create_person_invalid",
    )
    return html_view(request, "CreatePerson", model, CREATE_PERSON_VIEW_DATA, model_state)
