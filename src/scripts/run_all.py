"""
Run the entire experiment pipeline.

Steps:
01. Generate instances
02. Run greedy scheduler
03. Make plots
"""

from src.scripts.generate_instances import generate_instances
from src.scripts.run_greedy import run_greedy
from src.scripts.make_plots import make_plots


def run_all() -> None:
    steps = [
        ("01. Generate instances", generate_instances),
        ("02. Run greedy scheduler", run_greedy),
        ("03. Make plots", make_plots),
    ]

    print("----------------------------------------------------------------------")
    print("Running the entire experiment pipeline...\n\n")

    for title, func in steps:
        print("----------------------------------------------------------------------")
        print(f"Running {title}...")

        func()

        print(f"{title} completed successfully!")

    print("\n\n----------------------------------------------------------------------")
    print("Pipeline completed successfully!")
    print("----------------------------------------------------------------------")


def main() -> None:
    run_all()


if __name__ == "__main__":
    main()
