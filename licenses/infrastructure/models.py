"""
License model.
"""
from django.db import models
from django.db.models import Q


class License(models.Model):
    """
    A license record: a key plus ownership and activation state.

    Pre-issued records are inactive and may have no email. Issued records
    are active from creation and carry the purchaser's email.
    """

    key = models.CharField(max_length=64, unique=True, editable=False)
    email = models.EmailField(null=True, blank=True, db_index=True)
    active = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(db_index=True)
    activated_at = models.DateTimeField(null=True, blank=True)
    external_order_ref = models.CharField(
        max_length=128,
        null=True,
        blank=True,
        unique=True,
        help_text="Storefront order reference; one license per order",
    )

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["email", "-created_at"], name="licenses_email_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(activated_at__isnull=True) | Q(active=True),
                name="licenses_activated_implies_active",
            ),
        ]

    def __str__(self):
        return self.key
