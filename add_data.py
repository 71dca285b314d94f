"""
Script to add sample data to the EduRecords platform via REST API.
Make sure the server is running before executing this script.

Usage:
    python add_data.py
"""

import os
import sys

import requests


def _console_supports_utf8() -> bool:
    enc = getattr(sys.stdout, "encoding", None)
    return enc is not None and "utf" in enc.lower()


_OK_CHAR = "✓" if _console_supports_utf8() else "[OK]"
_FAIL_CHAR = "✗" if _console_supports_utf8() else "[FAIL]"


def _detect_base_url() -> str:
    """Determine a reachable BASE_URL.

    Priority: environment variable `EDURECORDS_BASE_URL`, then common local ports.
    If nothing responds, fall back to http://127.0.0.1:8000.
    """
    env = os.environ.get("EDURECORDS_BASE_URL")
    if env:
        return env

    candidates = [
        "http://127.0.0.1:8000",
        "http://127.0.0.1:8888",
        "http://localhost:8000",
        "http://localhost:8888",
    ]

    for c in candidates:
        try:
            resp = requests.get(f"{c}/health", timeout=0.5)
            if resp.status_code == 200:
                return c
        except requests.exceptions.RequestException:
            continue

    return candidates[0]


def check_server(base_url):
    """Check if the server is running."""
    try:
        response = requests.get(f"{base_url}/health", timeout=2)
        if response.status_code == 200:
            print(f"{_OK_CHAR} Server is running")
            return True
    except requests.exceptions.RequestException:
        pass
    print(f"{_FAIL_CHAR} Server is not running!")
    print("\nPlease start the server first:")
    print("  python -m edurecords.main --rest-port 8000")
    return False


def _post(base_url, path, data, label):
    """POST a record and return the created entity, or None on failure."""
    try:
        response = requests.post(f"{base_url}{path}", json=data)
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error creating {label}: {e}")
        return None
    if response.status_code == 201:
        print(f"{_OK_CHAR} Created {label}")
        return response.json()
    print(f"{_FAIL_CHAR} Failed to create {label}: {response.text}")
    return None


def create_subject(base_url, name):
    return _post(base_url, "/subjects", {"name": name}, f"subject: {name}")


def create_student(base_url, name, password):
    return _post(base_url, "/students", {"name": name, "password": password}, f"student: {name}")


def create_teacher(base_url, name, password):
    return _post(base_url, "/teachers", {"name": name, "password": password}, f"teacher: {name}")


def create_class(base_url, name, teacher):
    return _post(base_url, "/classes", {"name": name, "teacher": teacher}, f"class: {name}")


def create_assignment(base_url, name, subject, task):
    data = {"name": name, "subject": subject, "task": task}
    return _post(base_url, "/assignments", data, f"assignment: {name} ({subject['name']})")


def create_submission(base_url, student, assignment, task):
    data = {"student": student, "assignment": assignment, "task": task}
    return _post(
        base_url, "/submissions", data,
        f"submission: {student['name']} -> {assignment['name']}"
    )


def seed(base_url):
    """Create a small, connected data set. Returns the number of failed calls."""
    failures = 0

    def track(result):
        nonlocal failures
        if result is None:
            failures += 1
        return result

    print("\nCreating subjects...")
    subjects = [track(create_subject(base_url, name)) for name in ("Mathematics", "Physics", "History")]

    print("\nCreating students...")
    students = [
        track(create_student(base_url, name, password))
        for name, password in (("Ada", "pw1"), ("Alan", "pw2"), ("Grace", "pw3"))
    ]

    print("\nCreating teacher and class...")
    teacher = track(create_teacher(base_url, "Edsger", "secret"))
    if teacher:
        track(create_class(base_url, "Form 4B", teacher))

    print("\nCreating assignments...")
    assignments = []
    for subject, name in zip(subjects, ("Algebra HW", "Kinematics HW", "Essay")):
        if subject:
            assignments.append(track(create_assignment(base_url, name, subject, ["part 1", "part 2"])))

    print("\nCreating submissions...")
    for student, assignment in zip(students, assignments):
        if student and assignment:
            track(create_submission(base_url, student, assignment, ["part 1 done", "part 2 done"]))

    return failures


def main():
    base_url = _detect_base_url()
    print(f"Using server at {base_url}")
    if not check_server(base_url):
        return 1

    failures = seed(base_url)
    if failures:
        print(f"\n{_FAIL_CHAR} Seeding finished with {failures} failed call(s)")
        return 1
    print(f"\n{_OK_CHAR} Seeding finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
