"""
core/services/
Camada de serviços do núcleo de discovery.

Contém lógica de negócio agnóstica à interface:
- target_expander      : IP único / faixa → lista de alvos.
- reachability_service : Varredura ICMP (fping) e handshake TCP.
- probe_executor       : Worker de probe fora do processo.
- process_runner       : Processos externos com prazo rígido.
- discovery_service    : Motor/dispatcher do pipeline completo.
- errors               : Taxonomia de erros do pipeline.
"""
