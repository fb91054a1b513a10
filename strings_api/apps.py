from django.apps import AppConfig


class StringsApiConfig(AppConfig):
    name = 'strings_api'
    verbose_name = 'Strings API'

    def ready(self):
        from .store import ContentStore

        self.store = ContentStore()
