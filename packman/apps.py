"""Django app configuration for Packman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class PackmanConfig(AppConfig):
    """Configuration for Packman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "packman"
    verbose_name = _("Lottery Pack Management")
