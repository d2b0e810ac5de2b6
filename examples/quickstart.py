from __future__ import annotations


def main() -> None:
    # [START README_QUICKSTART]
    import logging
    import math

    from spectral_wave import Field, WaveConfig, solve_wave
    from spectral_wave.diagnostics import convergence_sweep, history_to_frame

    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    cfg = WaveConfig.uniform(2, 12, scheme="dg", step=0.001, duration=2.0)
    sol = solve_wave(cfg)

    T = sol.t_final
    print("pi(3, T):", sol.evaluate(3.0, Field.PI))
    print("exact   :", math.cos(2.0 * (T - 3.0)))

    frame = history_to_frame(sol)
    print(frame.tail())

    print(convergence_sweep([4, 8, 12, 16], duration=1.0))
    # [END README_QUICKSTART]


if __name__ == "__main__":
    main()
