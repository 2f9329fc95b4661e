import logging
import uuid

from django.db.models import Q

from formentry.clinical.models import LocationTag, PatientProgram, Program, ProgramWorkflowState

logger = logging.getLogger(__name__)


def _as_uuid(identifier: str):
    try:
        return uuid.UUID(identifier)
    except ValueError:
        return None


def _by_id_or_uuid(queryset, identifier: str):
    if identifier.isdecimal():
        found = queryset.filter(pk=int(identifier)).first()
        if found:
            return found
    identifier_uuid = _as_uuid(identifier)
    if identifier_uuid:
        return queryset.filter(uuid=identifier_uuid).first()
    return None


def get_program(identifier: str | None) -> Program | None:
    """Look up a program by primary key, UUID or name."""
    identifier = (identifier or "").strip()
    if not identifier:
        return None
    program = _by_id_or_uuid(Program.objects.all(), identifier)
    if program is None:
        program = Program.objects.filter(name__iexact=identifier).first()
    if program is None:
        logger.debug("No program matches '%s'", identifier)
    return program


def get_state(identifier: str | None, program: Program) -> ProgramWorkflowState | None:
    """Look up a workflow state belonging to one of ``program``'s workflows.

    ``identifier`` is a primary key, a UUID or a ``SOURCE:CODE`` concept mapping
    where SOURCE is the concept source name or its HL7 code.
    """
    identifier = (identifier or "").strip()
    if not identifier or program is None:
        return None
    states = ProgramWorkflowState.objects.filter(workflow__program=program).select_related("workflow")
    if ":" in identifier:
        source, _, code = (part.strip() for part in identifier.partition(":"))
        state = None
        if source and code:
            state = (
                states.filter(
                    Q(concept__mappings__source__name__iexact=source)
                    | Q(concept__mappings__source__hl7_code__iexact=source),
                    concept__mappings__code__iexact=code,
                )
                .distinct()
                .first()
            )
    else:
        state = _by_id_or_uuid(states, identifier)
    if state is None:
        logger.debug("No workflow state of program %s matches '%s'", program, identifier)
    return state


def get_location_tag(identifier: str | None) -> LocationTag | None:
    identifier = (identifier or "").strip()
    if not identifier:
        return None
    tag = _by_id_or_uuid(LocationTag.objects.all(), identifier)
    if tag is None:
        tag = LocationTag.objects.filter(name__iexact=identifier).first()
    if tag is None:
        logger.debug("No location tag matches '%s'", identifier)
    return tag


def is_enrolled_in_program_on_date(patient, program, on_date) -> bool:
    if patient is None or program is None or on_date is None:
        return False
    if patient.pk is None:
        return False
    return PatientProgram.objects.filter(patient=patient, program=program).active_on(on_date).exists()

