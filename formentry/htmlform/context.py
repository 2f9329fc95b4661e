from enum import Enum

from django.utils import timezone

from formentry.htmlform.exceptions import BadFormDesignException


class Mode(Enum):
    VIEW = "view"
    ENTER = "enter"
    EDIT = "edit"


class FormEntryContext:
    """Tracks the widgets of one form render and the mode it is rendered in.

    Widgets are given sequential field names (``w1``, ``w2``, ...) as they are
    registered; those names key the submitted values.
    """

    def __init__(self, mode=Mode.ENTER, patient=None, encounter_date=None, previous_encounter_date=None):
        self.mode = mode
        self.existing_patient = patient
        self.encounter_date = encounter_date
        self.previous_encounter_date = previous_encounter_date
        self._field_names = {}
        self._error_widgets = {}
        self._error_targets = {}
        self._errors = {}

    def register_widget(self, widget) -> str:
        if widget not in self._field_names:
            self._field_names[widget] = f"w{len(self._field_names) + 1}"
        return self._field_names[widget]

    def register_error_widget(self, widget, error_widget) -> str:
        name = self.register_widget(error_widget)
        self._error_widgets[widget] = error_widget
        self._error_targets[error_widget] = widget
        return name

    def get_field_name(self, widget) -> str:
        try:
            return self._field_names[widget]
        except KeyError:
            raise BadFormDesignException(f"{widget.__class__.__name__} was rendered before being registered")

    def get_error_widget(self, widget):
        return self._error_widgets.get(widget)

    def get_error_target(self, error_widget):
        return self._error_targets.get(error_widget)

    def add_errors(self, widget, messages):
        self._errors.setdefault(widget, []).extend(messages)

    def get_errors(self, widget) -> list[str]:
        return self._errors.get(widget, [])

    def get_best_approximation_of_encounter_date(self):
        if self.encounter_date is not None:
            return self.encounter_date
        return timezone.now()
