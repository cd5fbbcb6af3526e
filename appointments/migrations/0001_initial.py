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
            name="Appointment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("time", models.TimeField()),
                ("type", models.CharField(choices=[("consultation", "Consultation"), ("follow_up", "Follow-up"), ("vaccination", "Vaccination"), ("blood_test", "Blood Test"), ("physical_therapy", "Physical Therapy"), ("emergency", "Emergency")], default="consultation", max_length=20)),
                ("priority", models.CharField(choices=[("urgent", "Urgent"), ("high", "High"), ("normal", "Normal"), ("low", "Low")], default="normal", max_length=10)),
                ("status", models.CharField(choices=[("pending", "Pending Review"), ("under_review", "Under Review"), ("assigned", "Assigned to Doctor"), ("rejected", "Rejected"), ("confirmed", "Confirmed"), ("rescheduled", "Rescheduled"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="pending", max_length=16)),
                ("reason", models.CharField(blank=True, max_length=255)),
                ("notes", models.TextField(blank=True)),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("assigned_at", models.DateTimeField(blank=True, null=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("rejected_at", models.DateTimeField(blank=True, null=True)),
                ("rejection_reason", models.TextField(blank=True)),
                ("cancellation_reason", models.TextField(blank=True)),
                ("reschedule_reason", models.TextField(blank=True)),
                ("rescheduled_date", models.DateField(blank=True, null=True)),
                ("rescheduled_time", models.TimeField(blank=True, null=True)),
                ("reassignment_count", models.PositiveIntegerField(default=0)),
                ("reminder_sent_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("patient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="appointments", to=settings.AUTH_USER_MODEL)),
                ("doctor", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="appointments_as_doctor", to=settings.AUTH_USER_MODEL)),
                ("reviewed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="appointments_reviewed", to=settings.AUTH_USER_MODEL)),
                ("assigned_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="appointments_assigned", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["date", "time", "id"],
                "indexes": [
                    models.Index(fields=["status", "date"], name="appt_status_date_idx"),
                    models.Index(fields=["doctor", "date"], name="appt_doctor_date_idx"),
                    models.Index(fields=["patient", "date"], name="appt_patient_date_idx"),
                ],
            },
        ),
    ]
