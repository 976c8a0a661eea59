"""
Path utilities for the Clinical Trials Query pipeline.
"""

import os

# Get the project root directory
def get_project_root():
    """Get the absolute path to the project root directory."""
    current_file = os.path.abspath(__file__)
    # Go up three levels: paths.py -> utils -> trials_query -> project_root
    return os.path.dirname(os.path.dirname(os.path.dirname(current_file)))

def get_config_path():
    """Get the path to the JSON configuration file."""
    return os.path.join(get_project_root(), "config", "config.json")

# Define paths for the output directories
def get_data_dir():
    """Get the path to the data directory."""
    return os.path.join(get_project_root(), "data")

def get_outputs_dir():
    """Get the path to the outputs directory."""
    return os.path.join(get_data_dir(), "outputs")

def get_exports_dir():
    """Get the path to the CSV/JSON exports directory."""
    return os.path.join(get_outputs_dir(), "exports")

# Create all required directories
def create_directories():
    """Create all required directories for the project."""
    directories = [
        get_data_dir(),
        get_outputs_dir(),
        get_exports_dir(),
    ]

    for directory in directories:
        os.makedirs(directory, exist_ok=True)

def print_all_paths():
    """Print all project paths for verification."""
    print("Project root:", get_project_root())
    print("Config file:", get_config_path())
    print("Data directory:", get_data_dir())
    print("Outputs directory:", get_outputs_dir())
    print("Exports directory:", get_exports_dir())

if __name__ == "__main__":
    create_directories()
    print_all_paths()
