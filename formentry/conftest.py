import datetime

import pytest

from formentry.clinical.models import Patient, Program, ProgramWorkflow
from formentry.clinical.tests.factories import PatientFactory, ProgramFactory, ProgramWorkflowFactory
from formentry.htmlform.context import FormEntryContext, Mode


@pytest.fixture
def patient(db) -> Patient:
    return PatientFactory()


@pytest.fixture
def program(db) -> Program:
    return ProgramFactory()


@pytest.fixture
def workflow(program) -> ProgramWorkflow:
    return ProgramWorkflowFactory(program=program)


@pytest.fixture
def encounter_date() -> datetime.date:
    return datetime.date(2024, 6, 1)


@pytest.fixture
def context(patient, encounter_date) -> FormEntryContext:
    return FormEntryContext(mode=Mode.ENTER, patient=patient, encounter_date=encounter_date)
