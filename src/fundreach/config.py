from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FR_",
    )

    # Simulation defaults (applied when a caller omits the option)
    simulation_num_years: int = 10
    simulation_num_runs: int = 10000
    simulation_investment_amount: float = 1_000_000
    simulation_performance: float = 0.0
    simulation_liquidity: float = 10_000

    # Parallelization
    simulation_max_workers: int | None = None  # None -> os.cpu_count()
    simulation_min_values_per_task: int = 2

    # Logging
    log_dir: str = "logs"
    log_file: str = "fundreach.log"

    def option_defaults(self) -> dict:
        """Simulation option defaults in the shape accepted by SimulationOptions."""
        return {
            "num_years": self.simulation_num_years,
            "num_runs": self.simulation_num_runs,
            "investment_amount": self.simulation_investment_amount,
            "performance": self.simulation_performance,
            "liquidity": self.simulation_liquidity,
        }
