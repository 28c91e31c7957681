"""
Store model: tenant boundary for packs, bins and shifts.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Store(models.Model):
    """
    A retail location selling lottery tickets.

    Store management lives outside Packman; this model only carries what
    packs, bins and shifts need to reference.
    """

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_('Code'),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Name'),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Store')
        verbose_name_plural = _('Stores')
        ordering = ['code']

    def __str__(self) -> str:
        return self.name
