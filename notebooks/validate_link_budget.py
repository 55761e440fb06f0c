"""Quick validation script for the default link budget (no GUI)."""
import numpy as np

from tbm_link.physics.constants import NOISE_FLOOR_V, VACUUM_PERMEABILITY_H_M
from tbm_link.physics.link_budget import ParameterSet, evaluate
from tbm_link.presets import PRESETS

params = ParameterSet()
metrics = evaluate(params)

print('=' * 60)
print('LINK BUDGET VALIDATION SUMMARY')
print('=' * 60)

print(f'\n[Parameters]')
for name, value in params.to_dict().items():
    print(f'  {name}: {value}')

print(f'\n[Derived Metrics]')
for name, value in metrics.to_display_dict().items():
    if isinstance(value, float):
        print(f'  {name}: {value:.4g}')
    else:
        print(f'  {name}: {value}')

# Analytical spot check
omega = 2 * np.pi * params.carrier_frequency
delta_expected = np.sqrt(2.0 / (omega * VACUUM_PERMEABILITY_H_M * params.ground_conductivity))
rel_error = abs(metrics.skin_depth_m - delta_expected) / delta_expected * 100
print(f'\n[Analytical Spot Check]')
print(f'  Skin depth computed: {metrics.skin_depth_m:.4f} m')
print(f'  Skin depth expected: {delta_expected:.4f} m')
print(f'  Relative error: {rel_error:.6f}%')

snr_expected = 20 * np.log10(metrics.v_resonant_v / NOISE_FLOOR_V)
print(f'  SNR computed: {metrics.snr_db:.2f} dB (expected {snr_expected:.2f} dB)')

print(f'\n[Presets]')
for key, preset in PRESETS.items():
    m = evaluate(preset['parameters'])
    print(f'  {key:<15} SNR {m.snr_db:+7.1f} dB  {m.status.value:<8}  '
          f'battery {m.battery_life_years:.2f} yr')
print('=' * 60)
