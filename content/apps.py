from django.apps import AppConfig


class ContentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'content'

    def ready(self):
        """Build the shared sanitizer policy once at startup."""
        from content.markdown.postprocessors.sanitizer import get_sanitizer_policy

        get_sanitizer_policy()
