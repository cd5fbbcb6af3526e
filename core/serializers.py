from rest_framework import serializers

from .models import DEFAULT_SETTINGS


class SettingsUpdateSerializer(serializers.Serializer):
    """
    Accepts {section: {key: value}} for known sections and keys. Each value
    must have the same type as its default.
    """

    def to_internal_value(self, data):
        if not isinstance(data, dict) or not data:
            raise serializers.ValidationError({"non_field_errors": ["No settings data provided."]})

        errors, cleaned = {}, {}
        for section, values in data.items():
            defaults = DEFAULT_SETTINGS.get(section)
            if defaults is None:
                errors[section] = ["Unknown settings section."]
                continue
            if not isinstance(values, dict):
                errors[section] = ["Expected an object of settings."]
                continue
            bad = {}
            for key, value in values.items():
                if key not in defaults:
                    bad[key] = ["Unknown setting."]
                elif type(value) is not type(defaults[key]):
                    bad[key] = [f"Expected a {type(defaults[key]).__name__}."]
            if bad:
                errors[section] = bad
            else:
                cleaned[section] = values

        if errors:
            raise serializers.ValidationError(errors)
        return cleaned
