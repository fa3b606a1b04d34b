import pandas as pd
from typing import Dict, List
from ..config.system_parameters import SystemParameters

class PresetManager:
    """Loads named prism assemblies from a CSV file."""

    REQUIRED_COLUMNS = [
        'Name', 'Wedge Angle (deg)', 'Refractive Index', 'Thickness (mm)',
        'Diameter (mm)', 'Separation (mm)', 'Screen Distance (mm)'
    ]

    def __init__(self, csv_path: str):
        self.csv_path = csv_path
        self.data = self._load_and_validate_csv()

    def _load_and_validate_csv(self) -> pd.DataFrame:
        """Load CSV and validate required columns."""
        try:
            df = pd.read_csv(self.csv_path, skipinitialspace=True)
        except FileNotFoundError:
            raise FileNotFoundError(f"Preset file not found at path: {self.csv_path}")
        except Exception as e:
            raise ValueError(f"Failed to load presets from {self.csv_path}: {e}")

        missing_columns = [col for col in self.REQUIRED_COLUMNS if col not in df.columns]
        if missing_columns:
            raise ValueError(f"Missing required columns in preset CSV: {missing_columns}")

        return df

    @property
    def names(self) -> List[str]:
        return self.data['Name'].astype(str).tolist()

    def get_parameters(self, name: str) -> SystemParameters:
        """Get the parameter set of a named preset."""
        row = self.data[self.data['Name'] == name]

        if row.empty:
            raise ValueError(f"Preset '{name}' not found. Available presets: {self.names}")

        return SystemParameters.from_csv_row(row.iloc[0])

    def get_all_parameters(self) -> Dict[str, SystemParameters]:
        """Parameter sets for every preset, keyed by name."""
        return {str(row['Name']): SystemParameters.from_csv_row(row) for _, row in self.data.iterrows()}
