import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Reason",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Staff",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=200, unique=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("active", models.BooleanField(default=True)),
                ("role", models.CharField(choices=[("USER", "User"), ("ADMIN", "Admin")], default="USER", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name_plural": "staff",
                "ordering": ["full_name"],
            },
        ),
        migrations.CreateModel(
            name="WfhEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("free_text_reason", models.CharField(blank=True, default="", max_length=255)),
                ("date", models.DateField()),
                (
                    "hours",
                    models.FloatField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(24),
                        ],
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_by", models.CharField(default="system", max_length=150)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "reason",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="entries",
                        to="tracker.reason",
                    ),
                ),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="entries",
                        to="tracker.staff",
                    ),
                ),
            ],
            options={
                "verbose_name": "WFH entry",
                "verbose_name_plural": "WFH entries",
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="wfhentry",
            constraint=models.UniqueConstraint(fields=("staff", "date"), name="uniq_wfhentry_staff_date"),
        ),
    ]
