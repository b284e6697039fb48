from model_bakery import baker
from rest_framework.test import APIClient

PASSWORD = "pass1234"


def make_user(role: str, **kwargs):
    user = baker.make("users.User", role=role, **kwargs)
    user.set_password(PASSWORD)
    user.save()
    return user


def login(user) -> APIClient:
    client = APIClient()
    token = client.post(
        "/api/v1/auth/token/", {"email": user.email, "password": PASSWORD}, format="json"
    ).data["access"]
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client
