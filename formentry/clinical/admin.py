from django.contrib import admin

from formentry.clinical.models import (
    Concept,
    ConceptMap,
    ConceptSource,
    Location,
    LocationTag,
    Patient,
    PatientProgram,
    PatientState,
    Program,
    ProgramWorkflow,
    ProgramWorkflowState,
)


class ConceptMapInline(admin.TabularInline):
    model = ConceptMap
    extra = 0


@admin.register(Concept)
class ConceptAdmin(admin.ModelAdmin):
    list_display = ("name", "uuid")
    inlines = [ConceptMapInline]
    search_fields = ["name", "mappings__code"]


@admin.register(ConceptSource)
class ConceptSourceAdmin(admin.ModelAdmin):
    list_display = ("name", "hl7_code")


@admin.register(LocationTag)
class LocationTagAdmin(admin.ModelAdmin):
    list_display = ("name", "description")
    search_fields = ["name"]


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("name", "parent")
    list_filter = ("tags",)
    search_fields = ["name"]


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("given_name", "family_name", "uuid")
    search_fields = ["given_name", "family_name"]


class ProgramWorkflowInline(admin.TabularInline):
    model = ProgramWorkflow
    extra = 0


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ("name", "retired")
    inlines = [ProgramWorkflowInline]
    search_fields = ["name"]


class ProgramWorkflowStateInline(admin.TabularInline):
    model = ProgramWorkflowState
    extra = 0


@admin.register(ProgramWorkflow)
class ProgramWorkflowAdmin(admin.ModelAdmin):
    list_display = ("program", "concept", "retired")
    inlines = [ProgramWorkflowStateInline]


class PatientStateInline(admin.TabularInline):
    model = PatientState
    extra = 0


@admin.register(PatientProgram)
class PatientProgramAdmin(admin.ModelAdmin):
    list_display = ("patient", "program", "date_enrolled", "date_completed", "voided")
    list_filter = ("program", "voided")
    inlines = [PatientStateInline]
