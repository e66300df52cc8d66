from collections import Counter

from pod_sorter.sorter.config import anchor_roles, role_caps, role_names
from pod_sorter.sorter.groups import place_groups
from pod_sorter.sorter.roles import assign_roles, role_counts
from pod_sorter.sorter.scoring import RoleScorer


class PodSorter:
    def __init__(self, config):
        self.config = config
        self.roles = role_names(config)
        self.caps = role_caps(config)
        self.over_role = config['over_role']
        self.anchor_roles = anchor_roles(config)
        self.pods = list(config.get('pods', []))
        self.scorer = RoleScorer(config.get('signals', {}), self.roles)

        # Filled by run()
        self.assignments = []
        self.slots = {}

    def run(self, candidates):
        """
        Recomputes scores, roles and pods for the whole candidate set.

        Nothing carries over between calls; capacity counters and pod slots
        start empty every time. Result rows come back in input order.
        """
        scored = [
            {"email": c['email'], "scores": self.scorer.score(c)}
            for c in candidates
        ]

        self.assignments = assign_roles(scored, self.caps, self.roles)
        self.slots, placements, floaters = place_groups(
            self.assignments, self.pods, self.anchor_roles, self.over_role
        )

        by_index = {a['index']: a for a in self.assignments}
        results = []
        for i, entry in enumerate(scored):
            a = by_index[i]
            row = {"email": entry['email']}
            for role in self.roles:
                row[role] = entry['scores'][role]
            row.update({
                "total": a['total'],
                "primary": a['primary'],
                "secondary": a['secondary'],
                "forced": a['forced'],
                "rank": a['rank'],
                "pod": placements.get(entry['email'], ""),
                "floater": entry['email'] in floaters,
            })
            results.append(row)

        return results

    def summary(self, results):
        counts = role_counts(results)
        pod_fill = {
            pod: sum(1 for email in roles.values() if email is not None)
            for pod, roles in self.slots.items()
        }
        return {
            "candidates": len(results),
            "role_counts": {role: counts.get(role, 0) for role in self.roles},
            "forced": sum(1 for r in results if r['forced']),
            "pod_fill": pod_fill,
            "floaters": sum(1 for r in results if r['floater']),
            "unplaced": dict(Counter(r['primary'] for r in results if not r['pod'])),
        }
