from formentry.htmlform.elements.enroll_in_program import EnrollInProgramElement

# tag name in the form definition -> element class
ELEMENT_TAGS = {
    "enrollInProgram": EnrollInProgramElement,
}
