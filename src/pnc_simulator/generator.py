"""Main interface for simulation generation."""

import logging

import numpy as np

from pathlib import Path
from typing import Dict, List, Optional, Union

from .components import (
    EntityAssigner,
    ExogenousGenerator,
    GeographyBuilder,
    IncomeReporter,
    ProviderPoolGenerator,
)
from .core.dag import PIPELINE_ORDER, validate_order
from .core.data_structures import GeographyTable, PopulationStructure, SimulationData
from .core.engine import CausalPropagationEngine
from .core.validation import validate_config
from .utils.config_loader import load_config, save_config


logger = logging.getLogger(__name__)


class SimulationGenerator:
    """High-level interface for generating simulation data.

    Everything that can fail on bad input or configuration (config checks,
    DAG order, geography tables, step construction, provider count) runs in
    the constructor, so `generate` never starts on a broken setup.
    """

    def __init__(
        self,
        config: Optional[Dict] = None,
        config_path: Optional[Union[str, Path]] = None,
        geography: Optional[GeographyTable] = None
    ):
        """Initialize simulation generator.

        Args:
            config: Configuration dictionary; loaded from `config_path` when omitted
            config_path: Path to YAML configuration file (packaged default if None)
            geography: Prebuilt region table; built from the configured CSVs when omitted
        """
        if config is None:
            config = load_config(config_path)
            logger.info("Loaded configuration from %s", config_path or "packaged default")
        self.config = config

        validate_config(self.config)
        validate_order(PIPELINE_ORDER)

        self.geography = geography or GeographyBuilder(self.config['geography']).load()

        self.provider_gen = ProviderPoolGenerator(self.config['population'], self.config['providers'])
        self.assigner = EntityAssigner()
        self.exogenous_gen = ExogenousGenerator(self.config['exogenous'])
        self.engine = CausalPropagationEngine(self.config['variables'])
        self.reporter = IncomeReporter(self.config['measurement']['income_reported'])

        n_subjects = self.config['population']['n_subjects']
        self.structure = PopulationStructure(
            n_subjects=n_subjects,
            n_providers=self.provider_gen.provider_count(n_subjects, self.geography.n_regions),
            n_regions=self.geography.n_regions
        )

        self.output_columns = self.config.get('output', {}).get('columns') or list(PIPELINE_ORDER)

    def _generate_once(self, seed: int) -> SimulationData:
        """Run the full pipeline for one seed."""
        provider_seed, assignment_seed, exogenous_seed, engine_seed, measurement_seed = (
            np.random.SeedSequence(seed).spawn(5)
        )

        provider_pool = self.provider_gen.generate(
            self.geography,
            self.structure.n_providers,
            np.random.default_rng(provider_seed)
        )

        df = self.assigner.assign(
            self.structure.n_subjects,
            self.geography,
            provider_pool,
            np.random.default_rng(assignment_seed)
        )
        df = self.exogenous_gen.generate(df, np.random.default_rng(exogenous_seed))
        df = self.engine.propagate(df, engine_seed)
        df = self.reporter.apply(df, np.random.default_rng(measurement_seed))

        columns = [c for c in self.output_columns if c in df.columns]
        if 'subject_id' not in columns:
            columns = ['subject_id'] + columns

        return SimulationData(
            data=df[columns].copy(),
            full_data=df,
            geography=self.geography,
            provider_pool=provider_pool,
            metadata=self._get_metadata(),
            config=self.config,
            seed=seed,
            structure=self.structure
        )

    def generate(
        self,
        n_reps: int = 1,
        seed: Optional[int] = None,
        output_dir: Optional[str] = None
    ) -> Union[SimulationData, List[SimulationData]]:
        """Generate simulated populations.

        Args:
            n_reps: Number of replications to generate
            seed: Base random seed (replication k uses seed + k)
            output_dir: Directory to save CSV files

        Returns:
            SimulationData or List[SimulationData]:
                Single dataset if n_reps=1, otherwise list of datasets
        """
        if seed is None:
            seed = self.config.get('random_seed', 42)

        datasets = []
        for rep in range(n_reps):
            rep_seed = seed + rep

            logger.info(
                "Generating replication %d/%d (%d subjects, %d providers, %d regions)",
                rep + 1, n_reps, self.structure.n_subjects,
                self.structure.n_providers, self.structure.n_regions
            )
            data = self._generate_once(rep_seed)

            if output_dir is not None:
                output_path = Path(output_dir)
                output_path.mkdir(parents=True, exist_ok=True)

                filename = f"pnc_sim_rep{rep+1:03d}.csv"
                data.save(str(output_path / filename))

            datasets.append(data)

            summary = data.summary()
            logger.info("  Outcome rate: %.2f%%", 100 * summary.get('outcome_rate', float('nan')))
            logger.info("  Median income: %.0f", summary['income_median'])

        if output_dir is not None:
            save_config(self.config, Path(output_dir) / 'simulation_config.yml')

        if n_reps == 1:
            return datasets[0]
        else:
            return datasets

    def _get_metadata(self) -> Dict:
        return {
            'structure': {
                'n_subjects': self.structure.n_subjects,
                'n_providers': self.structure.n_providers,
                'n_regions': self.structure.n_regions,
            },
            'generation_order': list(PIPELINE_ORDER),
            'encoders': dict(self.engine.encoders),
            'income_bands': list(self.reporter.labels),
        }

    def get_config_summary(self) -> Dict:
        """Get summary of configuration parameters."""
        variables = self.config['variables']
        return {
            'population': self.config['population'],
            'n_regions': self.geography.n_regions,
            'n_providers': self.structure.n_providers,
            'subjects_per_provider': self.structure.subjects_per_provider,
            'prevalence_targets': {
                name: spec['prevalence']
                for name, spec in variables.items() if spec.get('kind') == 'binary'
            },
            'correlation_targets': {
                name: spec['target_correlation']
                for name, spec in variables.items() if spec.get('kind') == 'continuous'
            },
        }
