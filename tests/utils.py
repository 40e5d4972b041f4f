from civicpulse.core.security import create_access_token


def token_for(user):
    return create_access_token(subject=user.id, role=user.role.value)


def report_form(**overrides):
    form = {
        "title": "Pothole",
        "description": "Garbage piled up next to the road",
        "type": "illegal_dumping",
        "latitude": "28.6",
        "longitude": "77.2",
    }
    form.update(overrides)
    return {key: value for key, value in form.items() if value is not None}
