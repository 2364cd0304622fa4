from django.db import models
import uuid


class AuditLog(models.Model):
    """Append-only trail of state-changing actions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    actor = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_entries'
    )
    action = models.CharField(max_length=64)
    entity_type = models.CharField(max_length=64)
    entity_id = models.CharField(max_length=64, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='audit_logs_entity__6b1f0c_idx'),
            models.Index(fields=['action', 'created_at'], name='audit_logs_action_2d9e41_idx'),
            models.Index(fields=['actor', 'created_at'], name='audit_logs_actor_i_8c3a57_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.action} {self.entity_type}:{self.entity_id}"
