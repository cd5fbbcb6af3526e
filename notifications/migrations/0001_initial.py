import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("category", models.CharField(choices=[("appointment", "Appointment"), ("registration", "Registration"), ("system", "System"), ("general", "General"), ("reminder", "Reminder")], default="general", max_length=20)),
                ("delivery_method", models.CharField(choices=[("email", "Email"), ("sms", "SMS"), ("push", "Push"), ("in_app", "In-App")], default="in_app", max_length=10)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("sent", "Sent"), ("failed", "Failed"), ("read", "Read")], default="pending", max_length=10)),
                ("title", models.CharField(max_length=200)),
                ("message", models.TextField(blank=True)),
                ("data", models.JSONField(blank=True, default=dict)),
                ("locale", models.CharField(default="en", max_length=8)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("attempts", models.PositiveIntegerField(default=0)),
                ("last_error", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user", "read_at", "created_at"], name="notif_user_read_idx"),
                    models.Index(fields=["status", "delivery_method"], name="notif_status_method_idx"),
                    models.Index(fields=["category"], name="notif_category_idx"),
                ],
            },
        ),
    ]
