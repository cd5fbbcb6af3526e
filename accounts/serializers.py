import re

from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from core.settings_cache import settings_cache
from .enums import UserRole
from .models import User


def check_password_requirements(value: str, requirements: dict) -> list[str]:
    problems = []
    if len(value) < int(requirements.get("min_length", 8)):
        problems.append(f"Password must be at least {requirements.get('min_length', 8)} characters.")
    if requirements.get("require_uppercase") and not re.search(r"[A-Z]", value):
        problems.append("Password must contain an uppercase letter.")
    if requirements.get("require_lowercase") and not re.search(r"[a-z]", value):
        problems.append("Password must contain a lowercase letter.")
    if requirements.get("require_numbers") and not re.search(r"\d", value):
        problems.append("Password must contain a number.")
    if requirements.get("require_symbols") and not re.search(r"[^A-Za-z0-9]", value):
        problems.append("Password must contain a symbol.")
    return problems


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(
        choices=[(r.value, r.label) for r in (UserRole.STUDENT, UserRole.ACADEMIC_STAFF)],
        default=UserRole.STUDENT,
    )

    class Meta:
        model = User
        fields = ["email","password","name","role","student_id","staff_no","phone","department"]

    def validate_password(self, value):
        problems = check_password_requirements(value, settings_cache.get_password_requirements())
        if problems:
            raise serializers.ValidationError(problems)
        validate_password(value)
        return value

    def validate(self, attrs):
        if attrs.get("role") == UserRole.STUDENT and not attrs.get("student_id"):
            raise serializers.ValidationError({"student_id": "Student number is required for students."})
        if attrs.get("role") == UserRole.ACADEMIC_STAFF and not attrs.get("staff_no"):
            raise serializers.ValidationError({"staff_no": "Staff number is required for academic staff."})
        return attrs

    def create(self, validated):
        pwd = validated.pop("password")
        user = User(**validated)
        user.set_password(pwd)
        user.save()
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(email=data["email"], password=data["password"])
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        data["user"] = user
        return data


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id","email","name","role","status","email_verified",
            "student_id","staff_no","phone","department","specialization",
        ]
        read_only_fields = fields


class DoctorSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id","name","email","phone","staff_no","department","specialization","status"]
