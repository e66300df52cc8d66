from collections import Counter


def preference_order(scores, role_order):
    # Highest own score first; ties go to the earlier role in role_order
    priority = {role: i for i, role in enumerate(role_order)}
    return sorted(role_order, key=lambda r: (-scores.get(r, 0.0), priority[r]))


def assign_roles(scored, caps, role_order):
    """
    Greedy primary/secondary role assignment.

    scored: list of {'email': ..., 'scores': {role: float}} in input order.
    caps: role -> capacity. Copied, so the caller's dict is untouched.
    role_order: tie-break priority between roles, highest first.

    Candidates are processed by total score descending. Python's sort is
    stable, so equal totals keep their input order. Each candidate takes the
    first role in its own preference order that still has capacity, and the
    role right after it in that order as secondary. When every role is full
    the top preference is given anyway and the assignment is marked forced.

    Returns assignments in processing (rank) order.
    """
    remaining = {role: int(caps.get(role, 0)) for role in role_order}

    ranked = sorted(
        enumerate(scored),
        key=lambda item: -sum(item[1]['scores'].get(r, 0.0) for r in role_order)
    )

    assignments = []
    for rank, (index, entry) in enumerate(ranked):
        prefs = preference_order(entry['scores'], role_order)

        primary = None
        secondary = None
        for role in prefs:
            if primary is None:
                if remaining[role] > 0:
                    primary = role
                    remaining[role] -= 1
            elif secondary is None:
                secondary = role
                break

        forced = False
        if primary is None:
            primary = prefs[0]
            secondary = prefs[1] if len(prefs) > 1 else None
            forced = True

        assignments.append({
            "email": entry['email'],
            "index": index,
            "rank": rank,
            "total": round(sum(entry['scores'].get(r, 0.0) for r in role_order), 4),
            "primary": primary,
            "secondary": secondary,
            "forced": forced,
        })

    return assignments


def role_counts(assignments):
    return dict(Counter(a['primary'] for a in assignments))
