"""Static component templates keyed by category."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .contracts import ComponentCategory

logger = logging.getLogger(__name__)

BASE_TEMPLATE_KEY = "BASE"

BASE_TEMPLATE = """\
{{IMPORTS}}
import { Component, OnInit } from '@angular/core';

/**
 * {{COMPONENT_NAME}} Component
 * {{DESCRIPTION}}
 * Category: {{CATEGORY}}
 */
@Component({
  selector: '{{SELECTOR}}',
  templateUrl: './{{SELECTOR}}.component.html',
  styleUrls: ['./{{SELECTOR}}.component.scss']
})
export class {{COMPONENT_NAME}}Component implements OnInit {

  category = '{{CATEGORY}}';

{{CATEGORY_LOGIC}}

  constructor() {
    console.log('{{COMPONENT_NAME}} initialized');
  }

  ngOnInit(): void {
    this.initialize();
  }

  private initialize(): void {
    // Component initialization logic
  }
}
"""

SAFETY_SYSTEM_TEMPLATE = """\
{{IMPORTS}}
import { Component, OnInit, Input, Output, EventEmitter } from '@angular/core';

/**
 * {{COMPONENT_NAME}} Component - Safety System
 * {{DESCRIPTION}}
 *
 * This component handles safety-critical operations in the automobile system.
 */
@Component({
  selector: '{{SELECTOR}}',
  templateUrl: './{{SELECTOR}}.component.html',
  styleUrls: ['./{{SELECTOR}}.component.scss']
})
export class {{COMPONENT_NAME}}Component implements OnInit {

  @Input() sensorData: any;
  @Output() alertTriggered = new EventEmitter<string>();

  category = '{{CATEGORY}}';
  safetyStatus: 'NORMAL' | 'WARNING' | 'CRITICAL' = 'NORMAL';

{{CATEGORY_LOGIC}}

  constructor() {
    console.log('Safety System {{COMPONENT_NAME}} initialized');
  }

  ngOnInit(): void {
    this.initializeSafetyMonitoring();
  }

  private initializeSafetyMonitoring(): void {
    this.checkSafetyParameters();
  }

  private checkSafetyParameters(): void {
    if (this.sensorData) {
      this.evaluateSafetyStatus();
    }
  }

  private evaluateSafetyStatus(): void {
    // Trigger alerts if necessary
  }

  public triggerAlert(message: string): void {
    this.alertTriggered.emit(message);
  }
}
"""

ENGINE_MANAGEMENT_TEMPLATE = """\
{{IMPORTS}}
import { Component, OnInit, Input } from '@angular/core';

/**
 * {{COMPONENT_NAME}} Component - Engine Management
 * {{DESCRIPTION}}
 *
 * Manages engine parameters and performance monitoring.
 */
@Component({
  selector: '{{SELECTOR}}',
  templateUrl: './{{SELECTOR}}.component.html',
  styleUrls: ['./{{SELECTOR}}.component.scss']
})
export class {{COMPONENT_NAME}}Component implements OnInit {

  @Input() engineData: any;

  category = '{{CATEGORY}}';
  rpm: number = 0;
  temperature: number = 0;
  fuelLevel: number = 100;

{{CATEGORY_LOGIC}}

  constructor() {
    console.log('Engine Management {{COMPONENT_NAME}} initialized');
  }

  ngOnInit(): void {
    this.initializeEngineMonitoring();
  }

  private initializeEngineMonitoring(): void {
    this.updateEngineParameters();
  }

  private updateEngineParameters(): void {
    if (this.engineData) {
      this.rpm = this.engineData.rpm || 0;
      this.temperature = this.engineData.temperature || 0;
      this.fuelLevel = this.engineData.fuelLevel || 100;
    }
  }

  public getEngineStatus(): string {
    if (this.temperature > 100) return 'OVERHEATING';
    if (this.fuelLevel < 10) return 'LOW_FUEL';
    return 'NORMAL';
  }
}
"""

INFOTAINMENT_TEMPLATE = """\
{{IMPORTS}}
import { Component, OnInit, Input, Output, EventEmitter } from '@angular/core';

/**
 * {{COMPONENT_NAME}} Component - Infotainment
 * {{DESCRIPTION}}
 *
 * Handles infotainment system functionality.
 */
@Component({
  selector: '{{SELECTOR}}',
  templateUrl: './{{SELECTOR}}.component.html',
  styleUrls: ['./{{SELECTOR}}.component.scss']
})
export class {{COMPONENT_NAME}}Component implements OnInit {

  @Input() displayMode: 'DAY' | 'NIGHT' = 'DAY';
  @Output() modeChanged = new EventEmitter<string>();

  category = '{{CATEGORY}}';
  currentMedia: any;
  volume: number = 50;

{{CATEGORY_LOGIC}}

  constructor() {
    console.log('Infotainment {{COMPONENT_NAME}} initialized');
  }

  ngOnInit(): void {
    this.initializeDisplay();
  }

  private initializeDisplay(): void {
    this.applyDisplayMode();
  }

  private applyDisplayMode(): void {
    // Apply current display mode settings
  }

  public changeVolume(newVolume: number): void {
    this.volume = Math.max(0, Math.min(100, newVolume));
  }

  public toggleDisplayMode(): void {
    this.displayMode = this.displayMode === 'DAY' ? 'NIGHT' : 'DAY';
    this.modeChanged.emit(this.displayMode);
    this.applyDisplayMode();
  }
}
"""

DIAGNOSTIC_TEMPLATE = """\
{{IMPORTS}}
import { Component, OnInit, Output, EventEmitter } from '@angular/core';

/**
 * {{COMPONENT_NAME}} Component - Diagnostic
 * {{DESCRIPTION}}
 *
 * Performs diagnostic operations and error code management.
 */
@Component({
  selector: '{{SELECTOR}}',
  templateUrl: './{{SELECTOR}}.component.html',
  styleUrls: ['./{{SELECTOR}}.component.scss']
})
export class {{COMPONENT_NAME}}Component implements OnInit {

  @Output() diagnosticComplete = new EventEmitter<any>();

  category = '{{CATEGORY}}';
  diagnosticCodes: string[] = [];
  isRunning: boolean = false;

{{CATEGORY_LOGIC}}

  constructor() {
    console.log('Diagnostic {{COMPONENT_NAME}} initialized');
  }

  ngOnInit(): void {
    this.initializeDiagnostics();
  }

  private initializeDiagnostics(): void {
    this.loadDiagnosticCodes();
  }

  private loadDiagnosticCodes(): void {
    // Load existing diagnostic codes
  }

  public runDiagnostics(): void {
    this.isRunning = true;
    setTimeout(() => {
      this.isRunning = false;
      this.diagnosticComplete.emit({
        codes: this.diagnosticCodes,
        timestamp: new Date()
      });
    }, 2000);
  }

  public clearDiagnosticCodes(): void {
    this.diagnosticCodes = [];
  }
}
"""


class TemplateService:
    """Serves component templates for the different categories."""

    def __init__(self, templates: Optional[Dict[str, str]] = None) -> None:
        self._templates: Dict[str, str] = {
            BASE_TEMPLATE_KEY: BASE_TEMPLATE,
            ComponentCategory.SAFETY_SYSTEM.value: SAFETY_SYSTEM_TEMPLATE,
            ComponentCategory.ENGINE_MANAGEMENT.value: ENGINE_MANAGEMENT_TEMPLATE,
            ComponentCategory.INFOTAINMENT.value: INFOTAINMENT_TEMPLATE,
            ComponentCategory.DIAGNOSTIC.value: DIAGNOSTIC_TEMPLATE,
        }
        if templates:
            self._templates.update(templates)

    def get_template(
        self, category: ComponentCategory, component_type: Optional[str] = None
    ) -> str:
        """Return the template for ``category``, or the base template.

        ``component_type`` does not influence selection yet.
        """
        template = self._templates.get(
            category.value, self._templates[BASE_TEMPLATE_KEY]
        )
        logger.info(f"Retrieved template for category: {category.value}")
        return template

    def available_templates(self) -> List[str]:
        return sorted(self._templates)
