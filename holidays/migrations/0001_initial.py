from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AcademicHoliday",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("type", models.CharField(choices=[("national_holiday", "National Holiday"), ("religious_holiday", "Religious Holiday"), ("semester_break", "Semester Break"), ("exam_period", "Exam Period"), ("registration_period", "Registration Period"), ("university_closure", "University Closure")], default="university_closure", max_length=24)),
                ("affects_staff_type", models.CharField(choices=[("all", "All Staff"), ("academic", "Academic Staff"), ("clinical", "Clinical Staff"), ("none", "No Staff")], default="all", max_length=10)),
                ("blocks_appointments", models.BooleanField(default=True)),
                ("academic_year", models.PositiveIntegerField()),
                ("source", models.CharField(choices=[("pdf_sync", "Calendar document"), ("auto_national_holidays", "National holidays"), ("manual_fallback", "Manual fallback"), ("manual", "Entered by an administrator")], default="manual", max_length=32)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["start_date", "id"],
                "indexes": [models.Index(fields=["start_date", "end_date"], name="holiday_range_idx")],
                "constraints": [models.UniqueConstraint(fields=("name", "academic_year"), name="holiday_name_year_uniq")],
            },
        ),
        migrations.CreateModel(
            name="CalendarSource",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("url_pattern", models.CharField(max_length=500, unique=True)),
                ("type", models.CharField(choices=[("pdf", "PDF"), ("html", "HTML"), ("api", "API")], default="pdf", max_length=8)),
                ("priority", models.PositiveSmallIntegerField(default=1)),
                ("is_active", models.BooleanField(default=True)),
                ("auto_discovered", models.BooleanField(default=False)),
                ("last_checked", models.DateTimeField(blank=True, null=True)),
                ("last_successful_sync", models.DateTimeField(blank=True, null=True)),
                ("consecutive_failures", models.PositiveIntegerField(default=0)),
                ("last_error", models.TextField(blank=True)),
                ("sync_metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["priority", "id"],
            },
        ),
    ]
