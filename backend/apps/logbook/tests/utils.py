import uuid
from datetime import timedelta

from django.utils import timezone

from apps.equipment.models import Equipment
from apps.logbook import services
from apps.users.models import User

PASSWORD = "correctpass"


def make_user(role="Operator", username=None, password=PASSWORD, **extra):
    return User.objects.create_user(
        username=username or f"{role.lower()}_{uuid.uuid4().hex[:8]}",
        password=password,
        full_name=f"{role} User",
        role=role,
        **extra,
    )


def make_equipment(code=None):
    return Equipment.objects.create(
        equipment_code=code or f"EQ-BIO-{uuid.uuid4().hex[:6]}",
        name="Bioreactor",
        type="Bioreactor",
        location="Suite A",
    )


def make_entry(author, equipment=None, **overrides):
    start = timezone.now() - timedelta(hours=2)
    fields = {
        "equipment_id": (equipment or make_equipment()).id,
        "activity_type": "Operation",
        "start_time": start,
        "end_time": start + timedelta(hours=1),
        "description": "Batch fermentation run",
        "batch_number": "B-001",
        "readings": {"temperature": 37.0, "ph": 7.1},
    }
    fields.update(overrides)
    return services.create_entry(author.id, **fields)


def make_submitted_entry(author, equipment=None):
    entry = make_entry(author, equipment)
    return services.submit_entry(entry.id, author.id, PASSWORD, "Complete and accurate")
