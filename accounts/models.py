from django.conf import settings
from django.db import models

class Profile(models.Model):
    """Personalisation data handed to the AI, plus the session version."""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    display_name = models.CharField(max_length=100, blank=True)
    bio = models.TextField(blank=True)
    values = models.JSONField(default=list, blank=True)
    interests = models.JSONField(default=list, blank=True)
    goals = models.TextField(blank=True)
    # bumped on logout; tokens carrying an older version are rejected
    token_version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile(user={self.user_id})"

    def as_prompt(self) -> str:
        def or_unset(value):
            return value or "(not set)"

        return (
            "User profile:\n"
            f"Name: {or_unset(self.display_name)}\n"
            f"About: {or_unset(self.bio)}\n"
            f"Values: {or_unset(', '.join(self.values))}\n"
            f"Interests: {or_unset(', '.join(self.interests))}\n"
            f"Goals: {or_unset(self.goals)}\n"
        )


def profile_for(user) -> Profile:
    profile, _ = Profile.objects.get_or_create(user=user)
    return profile
