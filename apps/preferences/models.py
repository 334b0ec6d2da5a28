from django.db import models


class Preference(models.Model):
    """Single persisted setting: a unique key holding a JSON value."""

    key = models.CharField(max_length=100, unique=True)
    value = models.JSONField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'preferences'
        ordering = ['key']

    def __str__(self):
        return self.key
