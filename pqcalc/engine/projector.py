"""
Result projector.

Splits the resolved quantities into the echoed inputs and the requested
outputs.
"""

from typing import Mapping, Optional

from pqcalc.models.outputs import QuantityResult


class ResultProjector:
    """Shapes resolved results into the inputs and outputs views."""

    def project(
        self,
        results: Mapping[str, QuantityResult],
        requested_inputs: Mapping[str, object],
        requested_outputs: Optional[Mapping[str, object]] = None,
    ) -> tuple[dict[str, QuantityResult], dict[str, QuantityResult]]:
        """
        Split results into (inputs_view, outputs_view).

        A quantity goes to the inputs view iff the caller overrode it.
        Everything else goes to the outputs view when no output filter was
        given (None or empty), or when the filter names it. Intermediate
        quantities outside the filter are dropped.
        """
        output_filter = requested_outputs or None
        inputs_view: dict[str, QuantityResult] = {}
        outputs_view: dict[str, QuantityResult] = {}

        for symbol, result in results.items():
            if symbol in requested_inputs:
                inputs_view[symbol] = result
            elif output_filter is None or symbol in output_filter:
                outputs_view[symbol] = result

        return inputs_view, outputs_view
