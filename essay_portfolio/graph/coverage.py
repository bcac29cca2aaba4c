"""Value coverage per college - a view computed on demand, never stored."""

from essay_portfolio.db.entities import EntityStore


class CoverageAggregator:
    """Unions the values of the essays fulfilling each college's prompts."""

    def __init__(self, entities: EntityStore):
        self.entities = entities

    def coverage_for_college(self, college_id: str) -> set[str]:
        """Value ids covered by the essays linked to a college's prompts.

        Prompts linked to an essay that no longer exists contribute nothing.
        """
        self.entities.colleges.require(college_id)

        covered: set[str] = set()
        for prompt in self.entities.prompts.list():
            if prompt.college_id != college_id or not prompt.linked_essay_id:
                continue
            essay = self.entities.essays.get(prompt.linked_essay_id)
            if essay is not None:
                covered.update(essay.assigned_values)
        return covered

    def coverage_report(self) -> list[dict]:
        """Coverage for every college, with the values still missing."""
        values = {v.id: v for v in self.entities.values.list()}
        essays = {e.id: e for e in self.entities.essays.list()}
        prompts = self.entities.prompts.list()

        report = []
        for college in self.entities.colleges.list():
            college_prompts = [p for p in prompts if p.college_id == college.id]
            fulfilled = 0
            covered: set[str] = set()

            for prompt in college_prompts:
                essay = essays.get(prompt.linked_essay_id) if prompt.linked_essay_id else None
                if essay is None:
                    continue
                fulfilled += 1
                covered.update(essay.assigned_values)

            report.append({
                "college_id": college.id,
                "college_name": college.name,
                "prompts": len(college_prompts),
                "fulfilled": fulfilled,
                "covered": [values[v] for v in sorted(covered) if v in values],
                "missing": [v for v in values.values() if v.id not in covered],
            })

        return report
