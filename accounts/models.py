"""
User account models.
"""
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.
    Used for curator authentication.
    """
    ROLE_ADMIN = 'admin'
    ROLE_GROUP_LEADER = 'group_leader'
    ROLE_CURATOR = 'curator'
    ROLE_BEGINNER = 'beginner'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_GROUP_LEADER, 'Group Leader'),
        (ROLE_CURATOR, 'Curator'),
        (ROLE_BEGINNER, 'Beginner'),
    ]

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CURATOR)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']

    def __str__(self):
        return self.email

    @property
    def is_beginner(self):
        """Beginners are in training: no session previews, test DOIs only."""
        return self.role == self.ROLE_BEGINNER

    def can_register_production_doi(self):
        return not self.is_beginner
