from django.db import models
from django.db.models import Q

from formentry.utils.db import BaseModel, as_date


class ConceptSource(BaseModel):
    name = models.CharField(max_length=255, unique=True)
    hl7_code = models.CharField(max_length=50, blank=True)

    def __str__(self):
        return self.name


class Concept(BaseModel):
    name = models.CharField(max_length=255)

    def __str__(self):
        return self.name


class ConceptMap(BaseModel):
    concept = models.ForeignKey(Concept, on_delete=models.CASCADE, related_name="mappings")
    source = models.ForeignKey(ConceptSource, on_delete=models.PROTECT)
    code = models.CharField(max_length=255)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["concept", "source", "code"], name="unique_concept_source_code"),
        ]

    def __str__(self):
        return f"{self.source.name}:{self.code}"


class LocationTag(BaseModel):
    name = models.CharField(max_length=255, unique=True)
    description = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return self.name


class Location(BaseModel):
    name = models.CharField(max_length=255)
    parent = models.ForeignKey("self", null=True, blank=True, on_delete=models.PROTECT, related_name="children")
    tags = models.ManyToManyField(LocationTag, blank=True, related_name="locations")

    def __str__(self):
        return self.name


class Patient(BaseModel):
    given_name = models.CharField(max_length=255)
    family_name = models.CharField(max_length=255)

    def __str__(self):
        return f"{self.given_name} {self.family_name}"


class Program(BaseModel):
    name = models.CharField(max_length=255, unique=True)
    description = models.CharField(max_length=255, blank=True)
    concept = models.ForeignKey(Concept, null=True, blank=True, on_delete=models.PROTECT)
    retired = models.BooleanField(default=False)

    def __str__(self):
        return self.name


class ProgramWorkflow(BaseModel):
    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="workflows")
    concept = models.ForeignKey(Concept, on_delete=models.PROTECT)
    retired = models.BooleanField(default=False)

    def __str__(self):
        return f"{self.program}: {self.concept}"


class ProgramWorkflowState(BaseModel):
    workflow = models.ForeignKey(ProgramWorkflow, on_delete=models.CASCADE, related_name="states")
    concept = models.ForeignKey(Concept, on_delete=models.PROTECT)
    initial = models.BooleanField(default=False)
    terminal = models.BooleanField(default=False)
    retired = models.BooleanField(default=False)

    def __str__(self):
        return str(self.concept)


class PatientProgramQuerySet(models.QuerySet):
    def active_on(self, on_date):
        on_date = as_date(on_date)
        return self.filter(voided=False, date_enrolled__lte=on_date).filter(
            Q(date_completed__isnull=True) | Q(date_completed__gt=on_date)
        )


class PatientProgram(BaseModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="programs")
    program = models.ForeignKey(Program, on_delete=models.PROTECT)
    date_enrolled = models.DateField()
    date_completed = models.DateField(null=True, blank=True)
    location = models.ForeignKey(Location, null=True, blank=True, on_delete=models.PROTECT)
    voided = models.BooleanField(default=False)

    objects = PatientProgramQuerySet.as_manager()

    def __str__(self):
        return f"{self.patient} in {self.program}"


class PatientState(BaseModel):
    patient_program = models.ForeignKey(PatientProgram, on_delete=models.CASCADE, related_name="states")
    state = models.ForeignKey(ProgramWorkflowState, on_delete=models.PROTECT)
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    voided = models.BooleanField(default=False)
