import json
import re
from pathlib import Path

import pandas as pd

# Sheet column -> candidate key
INPUT_COLUMNS = {
    "Email": "email",
    "Name": "name",
    "Trait": "trait",
    "Preference": "preference",
    "Tags": "tags",
    "Aspiration": "aspiration",
}


class SubmissionError(ValueError):
    pass


def _missing(value):
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def normalize_email(value):
    if _missing(value):
        return ""
    return str(value).strip().lower()


def parse_tags(value):
    """
    Tags arrive as a JSON list (what we write back), a real list, or a
    comma/semicolon separated string typed into the form.
    """
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    if _missing(value):
        return []

    text = str(value).strip()
    if not text:
        return []

    if text.startswith('['):
        try:
            parsed = json.loads(text)
            if isinstance(parsed, list):
                return [str(v).strip() for v in parsed if str(v).strip()]
        except json.JSONDecodeError:
            pass

    return [part.strip() for part in re.split(r'[,;]', text) if part.strip()]


def _clean(value):
    if _missing(value):
        return ""
    return str(value).strip()


def row_to_candidate(row):
    candidate = {}
    for column, key in INPUT_COLUMNS.items():
        value = row.get(column)
        if key == "email":
            candidate[key] = normalize_email(value)
        elif key == "tags":
            candidate[key] = parse_tags(value)
        else:
            candidate[key] = _clean(value)
    return candidate


def rows_to_candidates(df):
    """
    Sheet rows -> candidate dicts, one per e-mail.

    A later row with the same e-mail overwrites the earlier one in place, so
    the candidate keeps the position of its first submission.
    """
    candidates = []
    index_by_email = {}

    for _, row in df.iterrows():
        candidate = row_to_candidate(row)
        email = candidate['email']
        if not email:
            continue

        if email in index_by_email:
            candidates[index_by_email[email]] = candidate
        else:
            index_by_email[email] = len(candidates)
            candidates.append(candidate)

    return candidates


def validate_submission(submission, domain_pattern, allow_list=None):
    email = normalize_email(submission.get('email'))
    if not email:
        raise SubmissionError("Submission has no email")

    if domain_pattern and not re.match(domain_pattern, email, re.IGNORECASE):
        raise SubmissionError(f"Email {email} is not an organization address")

    allowed = {normalize_email(e) for e in (allow_list or [])}
    if allowed and email not in allowed:
        raise SubmissionError(f"Email {email} is not on the allow-list")

    return email


def result_columns(roles):
    return [f"{role} Score" for role in roles] + [
        "Total Score", "Primary Role", "Secondary Role", "Assigned Pod", "Floater"
    ]


class CandidateStore:
    def __init__(self, path):
        self.path = Path(path)
        self.df = None

    def load(self):
        if not self.path.exists():
            self.df = pd.DataFrame(columns=list(INPUT_COLUMNS))
        elif self.path.suffix == '.xlsx':
            self.df = pd.read_excel(self.path, engine='openpyxl')
        else:
            self.df = pd.read_csv(self.path, encoding='utf-8')

        for column in INPUT_COLUMNS:
            if column not in self.df.columns:
                self.df[column] = None
        return self.df

    def candidates(self):
        if self.df is None:
            self.load()
        return rows_to_candidates(self.df)

    def _find_rows(self, email):
        emails = self.df["Email"].map(normalize_email)
        return self.df.index[emails == email].tolist()

    def upsert(self, submission):
        """
        Writes one submission into the sheet. Every existing row for the
        same e-mail is overwritten in place; otherwise a row is appended.
        Returns True when a new row was created.
        """
        if self.df is None:
            self.load()

        email = normalize_email(submission.get('email'))
        values = {
            "Email": email,
            "Name": _clean(submission.get('name')),
            "Trait": _clean(submission.get('trait')),
            "Preference": _clean(submission.get('preference')),
            "Tags": json.dumps(parse_tags(submission.get('tags')), ensure_ascii=False),
            "Aspiration": _clean(submission.get('aspiration')),
        }

        # Text columns read back from an empty/numeric sheet may not be object dtype
        for column in values:
            if self.df[column].dtype != 'object':
                self.df[column] = self.df[column].astype('object')

        rows = self._find_rows(email)
        if not rows:
            self.df = pd.concat([self.df, pd.DataFrame([values])], ignore_index=True)
            return True

        for idx in rows:
            for column, value in values.items():
                self.df.at[idx, column] = value
        return False

    def write_results(self, results, roles):
        if self.df is None:
            self.load()

        for column in result_columns(roles):
            if column not in self.df.columns:
                self.df[column] = None
            self.df[column] = self.df[column].astype('object')

        by_email = {r['email']: r for r in results}
        for idx, row in self.df.iterrows():
            result = by_email.get(normalize_email(row.get('Email')))
            if result is None:
                continue
            for role in roles:
                self.df.at[idx, f"{role} Score"] = result[role]
            self.df.at[idx, "Total Score"] = result['total']
            self.df.at[idx, "Primary Role"] = result['primary']
            self.df.at[idx, "Secondary Role"] = result['secondary'] or ""
            self.df.at[idx, "Assigned Pod"] = result['pod']
            self.df.at[idx, "Floater"] = "Yes" if result['floater'] else "No"

    def save(self, path=None):
        target = Path(path) if path else self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.suffix == '.xlsx':
            self.df.to_excel(target, index=False, engine='openpyxl')
        else:
            self.df.to_csv(target, index=False, encoding='utf-8')
        return target
