from typing import Any

from src.rules.models import FieldRule

# Dotted names address the nested student document, e.g. familyInfo.city.
PROFILE_FIELDS: list[FieldRule] = [
    FieldRule(name="fullName", label="Full Name", required=True, max_length=100),
    FieldRule(name="backgroundEducation.grade1to8School", label="Grade 1-8 School", required=True),
    FieldRule(name="backgroundEducation.grade9to10School", label="Grade 9-10 School", required=True),
    FieldRule(name="backgroundEducation.grade11to12School", label="Grade 11-12 School", required=True),
    FieldRule(name="backgroundEducation.yearsAttended.grade1to8", label="Years (1-8)", required=True),
    FieldRule(name="backgroundEducation.yearsAttended.grade9to10", label="Years (9-10)", required=True),
    FieldRule(name="backgroundEducation.yearsAttended.grade11to12", label="Years (11-12)", required=True),
    FieldRule(name="familyInfo.fatherName", label="Father's Name", required=True),
    FieldRule(name="familyInfo.motherName", label="Mother's Name", required=True),
    FieldRule(name="familyInfo.kebele", label="Kebele", required=True),
    FieldRule(name="familyInfo.wereda", label="Wereda", required=True),
    FieldRule(name="familyInfo.city", label="City", required=True),
    FieldRule(name="healthInfo.disabilities", label="Disabilities"),
    FieldRule(name="healthInfo.diseases", label="Diseases"),
    FieldRule(name="healthInfo.supportNeeded", label="Support Needed"),
    FieldRule(
        name="healthInfo.bloodType",
        label="Blood Type",
        kind="select",
        choices=["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-", "Unknown"],
    ),
    FieldRule(name="healthInfo.allergies", label="Allergies"),
]

# Defaults the backend applies when health fields are left out.
HEALTH_DEFAULTS = {
    "healthInfo.disabilities": "None",
    "healthInfo.diseases": "None",
    "healthInfo.supportNeeded": "None",
}


def read_path(data: dict[str, Any] | None, dotted: str) -> Any:
    node: Any = data or {}
    for key in dotted.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def profile_values(profile: dict[str, Any] | None) -> dict[str, str]:
    """Form values for every profile field; an absent profile gives the defaults."""
    values: dict[str, str] = {}
    for rule in PROFILE_FIELDS:
        value = read_path(profile, rule.name)
        if value is None:
            value = "" if profile else HEALTH_DEFAULTS.get(rule.name, "")
        values[rule.name] = str(value)
    return values


def to_payload(values: dict[str, Any]) -> dict[str, Any]:
    """Nest dotted form values back into the student document shape."""
    payload: dict[str, Any] = {}
    for rule in PROFILE_FIELDS:
        value = values.get(rule.name)
        if isinstance(value, str):
            value = value.strip()
        node = payload
        *parents, leaf = rule.name.split(".")
        for key in parents:
            node = node.setdefault(key, {})
        node[leaf] = value if value not in ("", None) else None
    return payload


__all__ = ["HEALTH_DEFAULTS", "PROFILE_FIELDS", "profile_values", "read_path", "to_payload"]
