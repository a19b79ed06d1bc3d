# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Bean exceptions — failures while creating or locating named beans."""

from __future__ import annotations

from pyfactory.kernel.exceptions import ResolutionException
from pyfactory.signature.types import type_name


class BeanCreationError(ResolutionException):
    """Creating a bean failed; the original error is ``__cause__``."""

    def __init__(self, bean_type: type, name: str, reason: str) -> None:
        self.bean_type = bean_type
        self.name = name
        self.reason = reason
        super().__init__(
            f"Failed to create bean '{name}' of type '{type_name(bean_type)}': {reason}",
            code="BEAN_CREATION_FAILED",
            context={"bean_type": type_name(bean_type), "name": name},
        )


class NoSuchBeanError(ResolutionException):
    """No bean definition, provider or constructor yields the requested bean."""

    def __init__(
        self,
        *,
        bean_type: type,
        name: str,
        required_by: str | None = None,
        parameter: str | None = None,
    ) -> None:
        self.bean_type = bean_type
        self.name = name
        self.required_by = required_by
        self.parameter = parameter

        headline = f"No bean named '{name}' of type '{type_name(bean_type)}' can be created"
        lines = [f"NoSuchBeanError: {headline}"]
        if required_by or parameter:
            lines.append("")
            if required_by:
                lines.append(f"  Required by: {required_by}")
            if parameter:
                lines.append(f"    Parameter: {parameter}")
        lines.append("")
        lines.append("  Suggestions:")
        lines.append("    - Register the bean with BeanFactory.register()")
        lines.append("    - Give the constructor annotated parameters or defaults")
        lines.append("    - Check the name passed to Inject()")

        super().__init__(
            headline,
            code="NO_SUCH_BEAN",
            context={"bean_type": type_name(bean_type), "name": name},
        )
        self.args = ("\n".join(lines),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""
