from collections import defaultdict


def bucket_order(roles_present, anchor_roles, over_role):
    # Anchors first, over-supplied role after them, anything else last
    order = [r for r in anchor_roles]
    order.append(over_role)
    for role in roles_present:
        if role not in order:
            order.append(role)
    return order


def deal_bucket(emails, role, pod_names, slots):
    """
    Round-robin deal of one role's holders into pods.

    The cursor starts at pod 0 and moves to the pod after the last one
    filled. Each holder takes the first pod, scanning from the cursor and
    wrapping, whose slot for this role is still empty. Holders who find
    every slot taken are returned unplaced.
    """
    num_pods = len(pod_names)
    placed = {}
    unplaced = []
    cursor = 0

    for email in emails:
        target = None
        for step in range(num_pods):
            idx = (cursor + step) % num_pods
            if slots[pod_names[idx]].get(role) is None:
                target = idx
                break

        if target is None:
            unplaced.append(email)
            continue

        pod = pod_names[target]
        slots[pod][role] = email
        placed[email] = pod
        cursor = (target + 1) % num_pods

    return placed, unplaced


def place_groups(assignments, pod_names, anchor_roles, over_role):
    """
    assignments: role assignments in rank order (see roles.assign_roles).

    Returns (slots, placements, floaters):
      slots: pod -> {role: email or None}
      placements: email -> pod for every placed candidate
      floaters: set of over-role holders left without a pod
    """
    pod_names = list(pod_names)
    roles_present = []
    buckets = defaultdict(list)
    for a in assignments:
        if a['primary'] not in buckets:
            roles_present.append(a['primary'])
        buckets[a['primary']].append(a['email'])

    order = bucket_order(roles_present, anchor_roles, over_role)
    slots = {pod: {role: None for role in order} for pod in pod_names}

    placements = {}
    for role in order:
        placed, _ = deal_bucket(buckets.get(role, []), role, pod_names, slots)
        placements.update(placed)

    floaters = {
        a['email'] for a in assignments
        if a['primary'] == over_role and a['email'] not in placements
    }

    return slots, placements, floaters
