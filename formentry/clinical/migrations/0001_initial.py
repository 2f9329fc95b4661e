import uuid

import django.db.models.deletion
from django.db import migrations, models


def base_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
        ("created_by", models.CharField(blank=True, max_length=255)),
        ("modified_by", models.CharField(blank=True, max_length=255)),
        ("date_created", models.DateTimeField(auto_now_add=True)),
        ("date_modified", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ConceptSource",
            fields=base_fields()
            + [
                ("name", models.CharField(max_length=255, unique=True)),
                ("hl7_code", models.CharField(blank=True, max_length=50)),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="Concept",
            fields=base_fields()
            + [
                ("name", models.CharField(max_length=255)),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="ConceptMap",
            fields=base_fields()
            + [
                ("code", models.CharField(max_length=255)),
                (
                    "concept",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="mappings",
                        to="clinical.concept",
                    ),
                ),
                (
                    "source",
                    models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="clinical.conceptsource"),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="conceptmap",
            constraint=models.UniqueConstraint(fields=("concept", "source", "code"), name="unique_concept_source_code"),
        ),
        migrations.CreateModel(
            name="LocationTag",
            fields=base_fields()
            + [
                ("name", models.CharField(max_length=255, unique=True)),
                ("description", models.CharField(blank=True, max_length=255)),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="Location",
            fields=base_fields()
            + [
                ("name", models.CharField(max_length=255)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="children",
                        to="clinical.location",
                    ),
                ),
                ("tags", models.ManyToManyField(blank=True, related_name="locations", to="clinical.locationtag")),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="Patient",
            fields=base_fields()
            + [
                ("given_name", models.CharField(max_length=255)),
                ("family_name", models.CharField(max_length=255)),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="Program",
            fields=base_fields()
            + [
                ("name", models.CharField(max_length=255, unique=True)),
                ("description", models.CharField(blank=True, max_length=255)),
                ("retired", models.BooleanField(default=False)),
                (
                    "concept",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        to="clinical.concept",
                    ),
                ),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="ProgramWorkflow",
            fields=base_fields()
            + [
                ("retired", models.BooleanField(default=False)),
                ("concept", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="clinical.concept")),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="workflows",
                        to="clinical.program",
                    ),
                ),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="ProgramWorkflowState",
            fields=base_fields()
            + [
                ("initial", models.BooleanField(default=False)),
                ("terminal", models.BooleanField(default=False)),
                ("retired", models.BooleanField(default=False)),
                ("concept", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="clinical.concept")),
                (
                    "workflow",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="states",
                        to="clinical.programworkflow",
                    ),
                ),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="PatientProgram",
            fields=base_fields()
            + [
                ("date_enrolled", models.DateField()),
                ("date_completed", models.DateField(blank=True, null=True)),
                ("voided", models.BooleanField(default=False)),
                (
                    "location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        to="clinical.location",
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="programs",
                        to="clinical.patient",
                    ),
                ),
                ("program", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="clinical.program")),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="PatientState",
            fields=base_fields()
            + [
                ("start_date", models.DateField()),
                ("end_date", models.DateField(blank=True, null=True)),
                ("voided", models.BooleanField(default=False)),
                (
                    "patient_program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="states",
                        to="clinical.patientprogram",
                    ),
                ),
                (
                    "state",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        to="clinical.programworkflowstate",
                    ),
                ),
            ],
            options={"abstract": False},
        ),
    ]
