#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
插件依赖图：检测缺失依赖与环，按层级输出执行顺序
"""

from typing import Dict, Iterable, List, Sequence

from core.naming.errors import DependencyCycleError


class DependencyGraph:

    def __init__(self, plugins: Iterable):
        self.plugins = {plugin.plugin_id: plugin for plugin in plugins}

    def validate(self):
        for plugin_id, plugin in self.plugins.items():
            for dep in plugin.dependencies:
                if dep not in self.plugins:
                    raise DependencyCycleError(f'插件 {plugin_id} 依赖未注册的插件 {dep}')
        self.topological_order()

    def topological_order(self) -> List[str]:
        """Kahn 算法；同一批次内按层级、插件 id 排序保证确定性"""
        indegree: Dict[str, int] = {pid: 0 for pid in self.plugins}
        dependents: Dict[str, List[str]] = {pid: [] for pid in self.plugins}
        for pid, plugin in self.plugins.items():
            for dep in plugin.dependencies:
                if dep in self.plugins:
                    indegree[pid] += 1
                    dependents[dep].append(pid)

        ready = sorted((pid for pid, d in indegree.items() if d == 0), key=self._sort_key)
        order: List[str] = []
        while ready:
            current = ready.pop(0)
            order.append(current)
            for child in dependents[current]:
                indegree[child] -= 1
                if indegree[child] == 0:
                    ready.append(child)
            ready.sort(key=self._sort_key)

        if len(order) != len(self.plugins):
            remaining = sorted(set(self.plugins) - set(order))
            raise DependencyCycleError(f'插件依赖存在环: {remaining}', {'plugins': remaining})
        return order

    def layers(self) -> List[Sequence[str]]:
        """按插件声明的层级分组，层内保持拓扑顺序"""
        order = self.topological_order()
        grouped: Dict[int, List[str]] = {}
        for pid in order:
            grouped.setdefault(self.plugins[pid].layer, []).append(pid)
        for layer, ids in grouped.items():
            for pid in ids:
                for dep in self.plugins[pid].dependencies:
                    if dep in self.plugins and self.plugins[dep].layer > layer:
                        raise DependencyCycleError(f'插件 {pid} 依赖了更高层级的插件 {dep}')
        return [grouped[layer] for layer in sorted(grouped)]

    def waves(self, layer: Sequence[str]) -> List[List[str]]:
        """
        把同一层的插件按层内依赖深度分批

        同一批次内的插件互不依赖，可以并行；层内有依赖的插件排在其依赖之后的批次。
        """
        members = set(layer)
        depth: Dict[str, int] = {}
        for pid in layer:
            inner = [dep for dep in self.plugins[pid].dependencies if dep in members]
            depth[pid] = 1 + max((depth[dep] for dep in inner), default=-1)
        result: List[List[str]] = [[] for _ in range(max(depth.values(), default=-1) + 1)]
        for pid in layer:
            result[depth[pid]].append(pid)
        return result

    def _sort_key(self, plugin_id: str):
        return self.plugins[plugin_id].layer, plugin_id
