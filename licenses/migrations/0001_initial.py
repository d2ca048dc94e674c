from django.db import migrations, models
import django.db.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="License",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("key", models.CharField(editable=False, max_length=64, unique=True)),
                (
                    "email",
                    models.EmailField(blank=True, db_index=True, max_length=254, null=True),
                ),
                ("active", models.BooleanField(db_index=True, default=False)),
                ("created_at", models.DateTimeField(db_index=True)),
                ("activated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "external_order_ref",
                    models.CharField(
                        blank=True,
                        help_text="Storefront order reference; one license per order",
                        max_length=128,
                        null=True,
                        unique=True,
                    ),
                ),
            ],
            options={
                "db_table": "licenses",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["email", "-created_at"], name="licenses_email_created_idx"
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=django.db.models.Q(
                            ("activated_at__isnull", True), ("active", True), _connector="OR"
                        ),
                        name="licenses_activated_implies_active",
                    )
                ],
            },
        ),
    ]
