"""Operator-managed course metadata (categories and difficulty levels).

Both models share the same shape, so every function takes the model class.
"""
import logging

from django.db import IntegrityError, models, transaction

from LearningManagementApp.core.access import ensure_role
from LearningManagementApp.core.choices import UserRole
from LearningManagementApp.core.errors import Conflict, ErrorCode, NotFoundError

logger = logging.getLogger(__name__)


def _ensure_unique(model: type[models.Model], name: str, exclude_pk: int | None = None) -> None:
    qs = model.objects.filter(name__iexact=name)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict(f"'{name}' already exists", code=ErrorCode.DUPLICATE_NAME)


def list_entries(model: type[models.Model], include_inactive: bool = False):
    qs = model.objects.all()
    return qs if include_inactive else qs.active()


def get_entry(model: type[models.Model], pk: int):
    entry = model.objects.filter(pk=pk).first()
    if entry is None:
        raise NotFoundError(f"{model._meta.verbose_name.capitalize()} not found", code=ErrorCode.METADATA_NOT_FOUND)
    return entry


@transaction.atomic
def create_entry(operator, model: type[models.Model], name: str):
    ensure_role(operator, UserRole.OPERATOR)
    name = name.strip()
    _ensure_unique(model, name)
    try:
        with transaction.atomic():
            entry = model.objects.create(name=name)
    except IntegrityError:
        raise Conflict(f"'{name}' already exists", code=ErrorCode.DUPLICATE_NAME)
    logger.info("%s '%s' created by user %s", model.__name__, name, operator.pk)
    return entry


@transaction.atomic
def update_entry(operator, entry, name: str | None = None, active: bool | None = None):
    """Rename and/or (de)activate an entry. Inactive entries stay on existing courses."""
    ensure_role(operator, UserRole.OPERATOR)
    fields = []
    if name is not None and name.strip() != entry.name:
        name = name.strip()
        _ensure_unique(type(entry), name, exclude_pk=entry.pk)
        entry.name = name
        fields.append("name")
    if active is not None and active != entry.active:
        entry.active = active
        fields.append("active")
    if fields:
        entry.save(update_fields=fields)
        logger.info("%s %s updated (%s)", type(entry).__name__, entry.pk, ", ".join(fields))
    return entry


def toggle_entry(operator, entry):
    return update_entry(operator, entry, active=not entry.active)
