import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("appointments", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="MedicalRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("consultation", "Consultation"), ("diagnosis", "Diagnosis"), ("lab_result", "Lab Result"), ("vaccination", "Vaccination"), ("other", "Other")], default="consultation", max_length=16)),
                ("diagnosis", models.TextField(blank=True)),
                ("treatment", models.TextField(blank=True)),
                ("notes", models.TextField(blank=True)),
                ("blood_pressure", models.CharField(blank=True, max_length=10)),
                ("heart_rate", models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(20), django.core.validators.MaxValueValidator(250)])),
                ("temperature", models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ("weight", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("height", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("visit_date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("patient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="medical_records", to=settings.AUTH_USER_MODEL)),
                ("doctor", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="authored_records", to=settings.AUTH_USER_MODEL)),
                ("appointment", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="medical_records", to="appointments.appointment")),
            ],
            options={
                "ordering": ["-visit_date", "-id"],
                "indexes": [
                    models.Index(fields=["patient", "visit_date"], name="record_patient_visit_idx"),
                    models.Index(fields=["doctor", "visit_date"], name="record_doctor_visit_idx"),
                ],
            },
        ),
    ]
