from ._memory import MemoryResourceService
from .component import CrudController, CrudListener, ResourceService
from .models import FormState, ListQuery, form_value, item_id
from .ports import ResourceClientPort, ResourceServicePort

__all__ = [
    "CrudController",
    "CrudListener",
    "FormState",
    "ListQuery",
    "MemoryResourceService",
    "ResourceClientPort",
    "ResourceService",
    "ResourceServicePort",
    "form_value",
    "item_id",
]
