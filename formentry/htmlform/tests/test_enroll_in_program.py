import datetime
from unittest import mock

import pytest
from django.http import QueryDict

from formentry.clinical.tests.factories import (
    ConceptMapFactory,
    ConceptSourceFactory,
    LocationTagFactory,
    PatientProgramFactory,
    ProgramWorkflowFactory,
    ProgramWorkflowStateFactory,
)
from formentry.htmlform.context import FormEntryContext, Mode
from formentry.htmlform.elements.enroll_in_program import EnrollInProgramElement, parse_parameters
from formentry.htmlform.exceptions import BadFormDesignException, FormEntryException, InvalidSubmissionException
from formentry.htmlform.session import FormEntrySession


@pytest.mark.django_db
class TestParseParameters:
    def test_minimal_parameters(self, program):
        config = parse_parameters({"programId": str(program.pk)})
        assert config.program == program
        assert not config.show_date
        assert not config.show_checkbox
        assert config.toggle_target_id is None
        assert config.states == ()
        assert config.location_tag is None

    def test_unknown_parameters_are_ignored(self, program):
        config = parse_parameters({"programId": program.name, "color": "red"})
        assert config.program == program

    @pytest.mark.parametrize("value, expected", [("true", True), ("TRUE", True), ("false", False), ("yes", False)])
    def test_flags(self, program, value, expected):
        config = parse_parameters({"programId": program.name, "showDate": value, "showCheckbox": value})
        assert config.show_date is expected
        assert config.show_checkbox is expected

    @pytest.mark.parametrize(
        "parameters", [{}, {"programId": ""}, {"programId": "Unknown program"}, {"programId": "\u00b2"}]
    )
    def test_unresolved_program(self, program, parameters):
        with pytest.raises(FormEntryException) as exc_info:
            parse_parameters(parameters)
        assert exc_info.value.code == "invalid_program"
        assert str(exc_info.value).startswith("Couldn't find program in:")

    def test_unresolved_program_message_from_query_dict(self, program):
        with pytest.raises(FormEntryException) as exc_info:
            parse_parameters(QueryDict("programId=Unknown&showDate=true"))
        assert str(exc_info.value) == "Couldn't find program in: {'programId': 'Unknown', 'showDate': 'true'}"

    def test_states_keep_order(self, program):
        states = [ProgramWorkflowStateFactory(workflow=ProgramWorkflowFactory(program=program)) for _ in range(3)]
        state_ids = f" {states[2].pk}, {states[0].uuid} ,{states[1].pk}"
        config = parse_parameters({"programId": program.name, "stateIds": state_ids})
        assert config.states == (states[2], states[0], states[1])

    def test_states_by_concept_mapping(self, workflow):
        state = ProgramWorkflowStateFactory(workflow=workflow)
        ConceptMapFactory(concept=state.concept, source=ConceptSourceFactory(name="PIH"), code="2345")
        config = parse_parameters({"programId": workflow.program.name, "stateIds": "PIH:2345"})
        assert config.states == (state,)

    def test_repeated_state_is_collapsed(self, workflow):
        state = ProgramWorkflowStateFactory(workflow=workflow)
        config = parse_parameters({"programId": workflow.program.name, "stateIds": f"{state.pk},{state.uuid},"})
        assert config.states == (state,)

    def test_states_in_same_workflow(self, workflow):
        first, second = ProgramWorkflowStateFactory.create_batch(2, workflow=workflow)
        with pytest.raises(FormEntryException) as exc_info:
            parse_parameters({"programId": workflow.program.name, "stateIds": f"{first.pk},{second.pk}"})
        assert exc_info.value.code == "duplicate_workflow"
        assert str(exc_info.value) == "A patient cannot be in multiple states in the same workflow"

    def test_state_not_initial(self, workflow):
        state = ProgramWorkflowStateFactory(workflow=workflow, initial=False)
        with pytest.raises(FormEntryException) as exc_info:
            parse_parameters({"programId": workflow.program.name, "stateIds": str(state.uuid)})
        assert exc_info.value.code == "state_not_initial"
        assert "is not marked as initial" in str(exc_info.value)
        assert "Cannot find" not in str(exc_info.value)

    @pytest.mark.parametrize(
        "token, lookup",
        [
            ("99999", "with an id or uuid"),
            ("\u00b2", "with an id or uuid"),
            ("PIH:0000", "associated to a concept with a concept mapping"),
        ],
    )
    def test_state_not_found(self, workflow, token, lookup):
        with pytest.raises(FormEntryException) as exc_info:
            parse_parameters({"programId": workflow.program.name, "stateIds": token})
        assert exc_info.value.code == "state_not_found"
        assert str(exc_info.value) == f"Cannot find a program work flow state {lookup} that matches '{token}'"

    def test_state_of_another_program(self, program):
        state = ProgramWorkflowStateFactory()
        with pytest.raises(FormEntryException) as exc_info:
            parse_parameters({"programId": program.name, "stateIds": str(state.pk)})
        assert exc_info.value.code == "state_not_found"

    def test_location_tag(self, program):
        tag = LocationTagFactory(name="Program Location")
        config = parse_parameters({"programId": program.name, "locationTag": "Program Location"})
        assert config.location_tag == tag

    def test_unresolved_location_tag(self, program):
        with pytest.raises(FormEntryException) as exc_info:
            parse_parameters({"programId": program.name, "locationTag": "Nowhere"})
        assert exc_info.value.code == "invalid_location_tag"
        assert str(exc_info.value) == "Unable to find location tag Nowhere"

    def test_toggle(self, program):
        config = parse_parameters(
            {"programId": program.name, "showCheckbox": "true", "toggle": "{id: 'hiv-section', style: 'dim'}"}
        )
        assert config.toggle_target_id == "hiv-section"
        assert config.toggle_dim

    @pytest.mark.parametrize("show_checkbox", [None, "false"])
    def test_toggle_requires_checkbox(self, program, show_checkbox):
        parameters = {"programId": program.name, "toggle": "hiv-section"}
        if show_checkbox:
            parameters["showCheckbox"] = show_checkbox
        with pytest.raises(BadFormDesignException) as exc_info:
            parse_parameters(parameters)
        assert exc_info.value.code == "toggle_requires_checkbox"

    def test_toggle_without_target(self, program):
        with pytest.raises(BadFormDesignException) as exc_info:
            parse_parameters({"programId": program.name, "showCheckbox": "true", "toggle": "{style: 'dim'}"})
        assert exc_info.value.code == "invalid_toggle"

    def test_program_error_is_reported_first(self):
        with pytest.raises(FormEntryException) as exc_info:
            parse_parameters({"programId": "Unknown", "toggle": "x", "locationTag": "Nowhere"})
        assert exc_info.value.code == "invalid_program"

    def test_configuration_is_immutable(self, program):
        config = parse_parameters({"programId": program.name})
        with pytest.raises(AttributeError):
            config.show_date = True


@pytest.mark.django_db
class TestWidgets:
    def test_no_widgets(self, context, program):
        element = EnrollInProgramElement(context, {"programId": program.name})
        assert element.date_widget is None
        assert element.checkbox_widget is None
        assert element.render(context) == ""

    def test_widgets_are_registered(self, context, program):
        element = EnrollInProgramElement(
            context, {"programId": program.name, "showDate": "true", "showCheckbox": "true"}
        )
        assert context.get_field_name(element.date_widget) == "w1"
        assert context.get_error_widget(element.date_widget) is element.date_error_widget
        assert context.get_field_name(element.checkbox_widget) == "w3"
        assert context.get_error_widget(element.checkbox_widget) is element.checkbox_error_widget

    def test_checkbox_for_patient_not_enrolled(self, context, program):
        element = EnrollInProgramElement(context, {"programId": program.name, "showCheckbox": "true"})
        assert element.checkbox_widget.initial_value is None
        assert not element.checkbox_widget.disabled

    def test_checkbox_for_enrolled_patient(self, context, patient, program):
        PatientProgramFactory(patient=patient, program=program, date_enrolled=datetime.date(2024, 1, 1))
        element = EnrollInProgramElement(context, {"programId": program.name, "showCheckbox": "true"})

        assert element.checkbox_widget.initial_value == "true"
        assert element.checkbox_widget.disabled
        html = element.render(context)
        assert "checked" in html
        assert "disabled" in html

    def test_previous_encounter_date_is_preferred(self, patient, program):
        PatientProgramFactory(
            patient=patient,
            program=program,
            date_enrolled=datetime.date(2024, 1, 1),
            date_completed=datetime.date(2024, 3, 1),
        )
        context = FormEntryContext(
            mode=Mode.EDIT,
            patient=patient,
            encounter_date=datetime.date(2024, 6, 1),
            previous_encounter_date=datetime.date(2024, 2, 1),
        )
        element = EnrollInProgramElement(context, {"programId": program.name, "showCheckbox": "true"})
        assert element.checkbox_widget.disabled

    def test_enrollment_checked_on_approximate_encounter_date(self, patient, program):
        context = FormEntryContext(mode=Mode.ENTER, patient=patient)
        with mock.patch("formentry.clinical.lookups.is_enrolled_in_program_on_date") as is_enrolled:
            is_enrolled.return_value = False
            EnrollInProgramElement(context, {"programId": program.name, "showCheckbox": "true"})
        (checked_patient, checked_program, checked_date), _ = is_enrolled.call_args
        assert checked_patient == patient
        assert checked_program == program
        assert isinstance(checked_date, datetime.datetime)

    def test_toggle_is_attached_to_checkbox(self, context, program):
        element = EnrollInProgramElement(
            context, {"programId": program.name, "showCheckbox": "true", "toggle": "hiv-section"}
        )
        assert element.checkbox_widget.toggle_target == "hiv-section"
        assert not element.checkbox_widget.toggle_dim


@pytest.mark.django_db
class TestRender:
    parameters = {"showDate": "true", "showCheckbox": "true"}

    @pytest.mark.parametrize("mode", [Mode.ENTER, Mode.EDIT])
    def test_render_entry_modes(self, patient, program, mode):
        context = FormEntryContext(mode=mode, patient=patient)
        element = EnrollInProgramElement(context, {"programId": program.name, **self.parameters})
        html = element.render(context)

        date_position = html.index('type="date"')
        error_position = html.index('id="w2"')
        checkbox_position = html.index('type="checkbox"')
        assert date_position < error_position < checkbox_position

    def test_render_view_mode(self, patient, program):
        context = FormEntryContext(mode=Mode.VIEW, patient=patient)
        element = EnrollInProgramElement(context, {"programId": program.name, **self.parameters})
        html = element.render(context)

        assert 'id="w1"' in html
        assert "field-error" not in html
        assert "checkbox" not in html

    def test_render_checkbox_only(self, context, program):
        element = EnrollInProgramElement(context, {"programId": program.name, "showCheckbox": "true"})
        html = element.render(context)
        assert 'type="checkbox"' in html
        assert 'type="date"' not in html
        # the checkbox error widget is never rendered
        assert "field-error" not in html


@pytest.mark.django_db
class TestHandleSubmission:
    def _session(self, patient, mode=Mode.ENTER):
        return FormEntrySession(patient=patient, mode=mode, encounter_date=datetime.date(2024, 6, 1))

    def test_checkbox_checked(self, patient, program):
        session = self._session(patient)
        element = session.add_element(
            "enrollInProgram", {"programId": program.name, "showDate": "true", "showCheckbox": "true"}
        )
        date_field = session.context.get_field_name(element.date_widget)
        checkbox_field = session.context.get_field_name(element.checkbox_widget)

        element.handle_submission(session, {date_field: "2024-05-01", checkbox_field: "true"})

        (action,) = session.submission_actions.enrollments
        assert action.program == program
        assert action.enrollment_date == datetime.date(2024, 5, 1)

    @pytest.mark.parametrize("checkbox_value", ["false", "on", "TRUE", None])
    def test_checkbox_not_checked(self, patient, program, checkbox_value):
        session = self._session(patient)
        element = session.add_element("enrollInProgram", {"programId": program.name, "showCheckbox": "true"})
        submission = {}
        if checkbox_value is not None:
            submission[session.context.get_field_name(element.checkbox_widget)] = checkbox_value

        element.handle_submission(session, submission)

        assert session.submission_actions.enrollments == []

    def test_without_checkbox(self, patient, program):
        state = ProgramWorkflowStateFactory(workflow=ProgramWorkflowFactory(program=program))
        tag = LocationTagFactory()
        session = self._session(patient)
        element = session.add_element(
            "enrollInProgram",
            {"programId": program.name, "showDate": "true", "stateIds": str(state.pk), "locationTag": tag.name},
        )
        date_field = session.context.get_field_name(element.date_widget)

        element.handle_submission(session, {date_field: "2024-05-01"})

        (action,) = session.submission_actions.enrollments
        assert action.enrollment_date == datetime.date(2024, 5, 1)
        assert action.states == (state,)
        assert action.location_tag == tag

    def test_without_date_widget(self, patient, program):
        session = self._session(patient)
        element = session.add_element("enrollInProgram", {"programId": program.name})

        element.handle_submission(session, {})

        (action,) = session.submission_actions.enrollments
        assert action.enrollment_date is None
        assert action.states == ()
        assert action.location_tag is None

    def test_blank_date(self, patient, program):
        session = self._session(patient)
        element = session.add_element("enrollInProgram", {"programId": program.name, "showDate": "true"})

        element.handle_submission(session, {session.context.get_field_name(element.date_widget): ""})

        (action,) = session.submission_actions.enrollments
        assert action.enrollment_date is None

    def test_invalid_date(self, patient, program):
        session = self._session(patient)
        element = session.add_element("enrollInProgram", {"programId": program.name, "showDate": "true"})
        date_field = session.context.get_field_name(element.date_widget)

        with pytest.raises(InvalidSubmissionException) as exc_info:
            element.handle_submission(session, {date_field: "05/01/2024"})

        assert exc_info.value.code == "invalid_date"
        assert session.submission_actions.enrollments == []

    def test_view_mode(self, patient, program):
        session = self._session(patient, mode=Mode.VIEW)
        element = session.add_element("enrollInProgram", {"programId": program.name, "showCheckbox": "true"})

        element.handle_submission(session, {session.context.get_field_name(element.checkbox_widget): "true"})

        assert session.submission_actions.enrollments == []


@pytest.mark.django_db
@pytest.mark.parametrize(
    "submission",
    [{}, {"w1": "not a date", "w3": "maybe"}, {"w1": "", "w3": "true"}],
)
def test_validate_submission_reports_nothing(context, program, submission):
    element = EnrollInProgramElement(context, {"programId": program.name, "showDate": "true", "showCheckbox": "true"})
    assert element.validate_submission(context, submission) == []
