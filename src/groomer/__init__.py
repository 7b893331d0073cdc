"""Appointments, visits and payments for a pet grooming business."""

__version__ = "0.1.0"


# Import main lazily so that importing the domain layer does not pull in click
def __getattr__(name):
    if name == "main":
        from groomer.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
