from django.db import models

class RecordType(models.TextChoices):
    CONSULTATION = "consultation", "Consultation"
    DIAGNOSIS    = "diagnosis", "Diagnosis"
    LAB_RESULT   = "lab_result", "Lab Result"
    VACCINATION  = "vaccination", "Vaccination"
    OTHER        = "other", "Other"
