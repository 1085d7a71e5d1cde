from plantlink.parsing.care.validate import CARE_FIELDS, CareInstructions, validate_care_instructions

__all__ = ["CARE_FIELDS", "CareInstructions", "validate_care_instructions"]
