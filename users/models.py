# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    # Display name shown on team rosters, rating lists and evaluation results
    name = models.CharField(max_length=150, blank=True, null=True)
    image = models.CharField(max_length=1024, blank=True, null=True)

    @property
    def display_name(self):
        return self.name or self.username

    def __str__(self):
        return self.username
