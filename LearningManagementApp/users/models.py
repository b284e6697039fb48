from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models

from LearningManagementApp.core.choices import UserRole

phone_validator = RegexValidator(r"^\d{10,11}$", "Phone number must be 10 or 11 digits.")

class User(AbstractUser):
    """Account with a single system role; ``is_active=False`` marks a suspended user."""
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=11, blank=True, validators=[phone_validator])
    role = models.CharField(max_length=16, choices=UserRole.choices, default=UserRole.LEARNER)
    terms_accepted_at = models.DateTimeField(null=True, blank=True)
    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def is_learner(self) -> bool:
        return self.role == UserRole.LEARNER

    @property
    def is_instructor(self) -> bool:
        return self.role == UserRole.INSTRUCTOR

    @property
    def is_operator(self) -> bool:
        return self.role == UserRole.OPERATOR
