import sys
import pathlib

import matplotlib
# Headless backend before pyplot is ever imported (API workers have no display)
matplotlib.use('Agg')

# Add project root to sys.path to allow running as script
root_dir = str(pathlib.Path(__file__).parent.parent)
if root_dir not in sys.path:
    sys.path.append(root_dir)

from pod_sorter.sorter.config import load_config, load_json, save_json
from pod_sorter.sorter.pipeline import PodSorter


def run_sorter(config_path=None):
    base_dir = pathlib.Path(".")
    processed_dir = base_dir / "data" / "processed"
    results_dir = base_dir / "data" / "results"
    results_dir.mkdir(parents=True, exist_ok=True)

    config = load_config(config_path)

    candidates_file = processed_dir / "candidates.json"
    if not candidates_file.exists():
        print(f"[ERROR] Candidates file not found: {candidates_file}. Run step 2 first.")
        return None

    print(f"Loading candidates from {candidates_file}...")
    candidates = load_json(candidates_file)

    print("Sorting...")
    sorter = PodSorter(config)
    results = sorter.run(candidates)
    summary = sorter.summary(results)

    print(f"Role counts: {summary['role_counts']}")
    if summary['forced']:
        print(f"Over-capacity (forced) primaries: {summary['forced']}")
    print(f"Floaters: {summary['floaters']}")

    output_path = results_dir / "assignments.json"
    save_json(results, output_path)
    print(f"Assignments saved to {output_path}")

    pods_path = results_dir / "pods.json"
    save_json(sorter.slots, pods_path)
    print(f"Pods saved to {pods_path}")

    report_path = results_dir / "assignments_by_person.json"
    save_person_report(results, candidates, sorter, report_path)
    print(f"Person report saved to {report_path}")

    chart_path = results_dir / "pod_chart.svg"
    generate_pod_chart(sorter.slots, sorter.roles, chart_path)
    print(f"Pod chart saved to {chart_path}")

    return results


def save_person_report(results, candidates, sorter, output_path):
    # Per-person view: where they ended up and which signals put them there
    candidate_map = {c['email']: c for c in candidates}
    person_data = {}

    for r in sorted(results, key=lambda x: x['rank']):
        candidate = candidate_map.get(r['email'], {})
        person_data[r['email']] = {
            "name": candidate.get('name', ""),
            "rank": r['rank'],
            "scores": {role: r[role] for role in sorter.roles},
            "total": r['total'],
            "primary": r['primary'],
            "secondary": r['secondary'],
            "forced": r['forced'],
            "pod": r['pod'],
            "floater": r['floater'],
            "signals": sorter.scorer.explain(candidate),
        }

    save_json(person_data, output_path)


def generate_pod_chart(slots, roles, output_path):
    import matplotlib.pyplot as plt
    import numpy as np

    pods = list(slots)
    if not pods:
        print("No pods to plot.")
        return

    x = np.arange(len(pods))
    bottom = np.zeros(len(pods))

    plt.figure(figsize=(10, 4))
    for role in roles:
        filled = np.array([1 if slots[p].get(role) else 0 for p in pods])
        plt.bar(x, filled, bottom=bottom, label=role)
        bottom += filled

    plt.xticks(x, pods)
    plt.yticks(range(len(roles) + 1))
    plt.ylabel("Filled role slots")
    plt.title("Role slots filled per pod")
    plt.legend()

    plt.tight_layout()
    plt.savefig(output_path, format='svg')
    plt.close('all')


if __name__ == "__main__":
    run_sorter(sys.argv[1] if len(sys.argv) > 1 else None)
