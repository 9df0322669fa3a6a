"""jinja-views models"""

from jinja_views.models.base_models import DetailedHealthResponse, HealthResponse
from jinja_views.models.person import CreatePerson, Person
from jinja_views.models.upload import UploadedFileInfo

__all__ = [
    "CreatePerson",
    "DetailedHealthResponse",
    "HealthResponse",
    "Person",
    "UploadedFileInfo",
]
