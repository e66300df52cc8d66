import re


class RoleScorer:
    def __init__(self, signal_table, roles):
        """
        signal_table: role name -> list of {field, match, value, weight}.
        roles: ordered role names. Roles without signals always score 0.

        'equals' compares a single-choice field exactly.
        'contains' is a case-insensitive regex search over free text:
        'tags' searches the joined tag list, 'aspiration' the aspiration,
        'text' both of them.
        """
        self.roles = list(roles)
        self.signals = {}

        for role in self.roles:
            compiled = []
            for signal in signal_table.get(role, []):
                weight = float(signal.get('weight', 1.0))
                if weight < 0:
                    raise ValueError(f"Negative weight in signal for {role}: {signal}")

                match = signal.get('match', 'equals')
                if match == 'contains':
                    try:
                        pattern = re.compile(signal['value'], re.IGNORECASE)
                    except re.error as e:
                        raise ValueError(f"Bad pattern {signal['value']!r} for {role}: {e}") from e
                elif match == 'equals':
                    pattern = None
                else:
                    raise ValueError(f"Unknown match type {match!r} for {role}")

                compiled.append({
                    "field": signal['field'],
                    "match": match,
                    "value": signal['value'],
                    "pattern": pattern,
                    "weight": weight,
                })
            self.signals[role] = compiled

    @staticmethod
    def _text(value):
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return " ".join(str(v) for v in value if v is not None).lower()
        return str(value).lower()

    def _free_text(self, candidate, field):
        if field == "text":
            return f"{self._text(candidate.get('tags'))} {self._text(candidate.get('aspiration'))}"
        return self._text(candidate.get(field))

    def _matches(self, candidate, signal):
        if signal['match'] == 'contains':
            return signal['pattern'].search(self._free_text(candidate, signal['field'])) is not None

        value = candidate.get(signal['field'])
        if value is None:
            return False
        return str(value).strip() == signal['value']

    def score(self, candidate):
        scores = {}
        for role in self.roles:
            total = 0.0
            for signal in self.signals[role]:
                if self._matches(candidate, signal):
                    total += signal['weight']
            scores[role] = round(total, 4)
        return scores

    def explain(self, candidate):
        """Returns the signals that fired per role, for reports."""
        fired = {}
        for role in self.roles:
            fired[role] = [
                f"{s['field']} {s['match']} {s['value']} (+{s['weight']})"
                for s in self.signals[role] if self._matches(candidate, s)
            ]
        return fired
