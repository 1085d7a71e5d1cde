"""
Advisory backend access: the text completion client, the system
instructions sent with each request and the care instruction resolver.
"""
from plantlink.advisory.client import AdvisoryCapability, OpenAIAdvisory
from plantlink.advisory.prompts import CARE_SYSTEM_INSTRUCTION, DIAGNOSIS_SYSTEM_INSTRUCTION
from plantlink.advisory.resolver import CareInstructionResolver, parse_care_record

__all__ = [
    "AdvisoryCapability",
    "OpenAIAdvisory",
    "CARE_SYSTEM_INSTRUCTION",
    "DIAGNOSIS_SYSTEM_INSTRUCTION",
    "CareInstructionResolver",
    "parse_care_record",
]
