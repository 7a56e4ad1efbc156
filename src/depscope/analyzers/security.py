"""Security signal for a dependency.

No vulnerability database is queried yet: every package gets a clean
report. The signature is what a real scanner (OSV, npm audit) has to
satisfy to feed the scorer.
"""

from depscope.models.schemas import SecuritySignal


async def analyze_security(name: str, version_constraint: str) -> SecuritySignal:
    """Report known vulnerabilities for a package.

    Args:
        name: Package name.
        version_constraint: Declared version range (currently unused).

    Returns:
        SecuritySignal with no vulnerabilities.
    """
    return SecuritySignal.clean()
