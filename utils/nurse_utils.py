from typing import Iterable, List, Set
from core.enums import QualificationPolicy
from schemas.schedule.generate import NurseProfile, WardProfile


def normalise_qualifications(items: Iterable[str]) -> Set[str]:
    """Case- and whitespace-insensitive qualification set."""
    return {str(q).strip().upper() for q in items if str(q).strip()}


def meets_qualifications(
    nurse: NurseProfile,
    ward: WardProfile,
    policy: QualificationPolicy = QualificationPolicy.ANY,
) -> bool:
    """
    Whether a nurse satisfies a ward's required qualifications.

    A ward with no requirements accepts everyone. Under ANY one matching
    qualification is enough; under ALL the nurse must hold every one.
    """
    required = normalise_qualifications(ward.requiredQualifications)
    if not required:
        return True
    held = normalise_qualifications(nurse.qualifications)
    if policy == QualificationPolicy.ALL:
        return required <= held
    return bool(required & held)


def can_work_ward(
    nurse: NurseProfile,
    ward: WardProfile,
    policy: QualificationPolicy = QualificationPolicy.ANY,
) -> bool:
    """Profile eligibility: qualification, ward access and hierarchy level."""
    return (
        meets_qualifications(nurse, ward, policy)
        and nurse.can_access_ward(ward)
        and nurse.hierarchyLevel >= ward.minHierarchyLevel
    )


def get_nurse_ids(nurses: List[NurseProfile]) -> List[str]:
    """Get list of nurse ids in gene order."""
    return [n.id for n in nurses]
